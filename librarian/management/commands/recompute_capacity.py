from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError

from librarian.services.capacity import find_drift, recompute_all


class Command(BaseCommand):
    help = (
        "Сверяет сохранённую занятость залов с числом закреплённых "
        "читателей и (опционально) исправляет расхождения."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--apply",
            action="store_true",
            help="Записать исправления (по умолчанию только отчёт)",
        )
        parser.add_argument(
            "--hall-id",
            type=str,
            default="",
            help="Список id залов через запятую (по умолчанию все)",
        )

    def handle(self, *args, **opts):
        hall_ids = [
            int(x)
            for x in opts["hall_id"].split(",")
            if x.strip().isdigit()
        ] or None

        if opts["apply"]:
            try:
                drifts = recompute_all(hall_ids)
            except IntegrityError as exc:
                raise CommandError(
                    "Читателей в зале больше, чем мест; "
                    f"исправьте закрепления вручную ({exc})"
                ) from exc
        else:
            drifts = find_drift(hall_ids)

        broken = [d for d in drifts if not d.is_consistent]
        for d in broken:
            self.stdout.write(
                f"Зал {d.hall_id}: сохранено {d.stored}, фактически {d.actual}"
            )

        mode = "исправлено" if opts["apply"] else "найдено (dry-run)"
        self.stdout.write(
            self.style.SUCCESS(
                f"Проверено залов: {len(drifts)}, расхождений {mode}: "
                f"{len(broken)}."
            )
        )
