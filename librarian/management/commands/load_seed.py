import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from librarian.models import Author, Book, Hall, WrittenBy


class Command(BaseCommand):
    """Загружает авторов/книги/залы из JSON."""

    help = (
        "Загружает авторов, книги (со связями с авторами) и читальные залы "
        "из JSON. Занятость залов всегда начинается с нуля."
    )

    def add_arguments(self, parser) -> None:
        """Описать CLI-аргументы команды."""
        parser.add_argument(
            "json_path",
            type=str,
            help="Путь до файла JSON с данными",
        )
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Очистить каталог и залы перед загрузкой",
        )

    def handle(self, *args, **opts) -> None:
        """Выполнить загрузку JSON."""
        path = Path(opts["json_path"])
        if not path.exists():
            raise CommandError(f"Файл не найден: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CommandError(f"Некорректный JSON: {exc}") from exc

        # Загружаем справочники атомарно
        with transaction.atomic():
            if opts["flush"]:
                if Hall.objects.filter(profiles__isnull=False).exists():
                    raise CommandError(
                        "Нельзя очистить залы: за ними закреплены читатели"
                    )
                Book.objects.all().delete()
                Author.objects.all().delete()
                Hall.objects.all().delete()

            authors = [
                Author(id=a["id"], name=a["name"])
                for a in data.get("authors", [])
            ]
            Author.objects.bulk_create(authors, ignore_conflicts=True)

            books = [
                Book(
                    id=b["id"],
                    title=b["title"],
                    isbn=b["isbn"],
                    publish_date=b.get("publish_date"),
                    quantity=b.get("quantity", 1),
                    rating=b.get("rating", 0),
                )
                for b in data.get("books", [])
            ]
            Book.objects.bulk_create(books, ignore_conflicts=True)

            links = [
                WrittenBy(book_id=b["id"], author_id=author_id)
                for b in data.get("books", [])
                for author_id in b.get("author_ids", [])
            ]
            WrittenBy.objects.bulk_create(links, ignore_conflicts=True)

            halls = [
                Hall(
                    id=h["id"],
                    library_name=h["library_name"],
                    name=h["name"],
                    total_capacity=h["total_capacity"],
                    taken_capacity=0,
                    specification=h.get("specification", ""),
                )
                for h in data.get("halls", [])
            ]
            Hall.objects.bulk_create(halls, ignore_conflicts=True)

        self.stdout.write(
            self.style.SUCCESS(
                f"Загружено: авторов {len(authors)}, книг {len(books)}, "
                f"залов {len(halls)}."
            )
        )
