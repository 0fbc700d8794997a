from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction

from librarian.models import Author, Book, WrittenBy
from librarian.services.errors import IsbnTaken, NotFound, ReferenceMissing

logger = logging.getLogger(__name__)


@dataclass
class BookData:
    title: str
    isbn: str
    quantity: int = 1
    rating: float = 0.0
    publish_date: Optional[date] = None
    author_ids: List[int] = field(default_factory=list)


def _unique_ids(ids: Iterable[int]) -> List[int]:
    seen: List[int] = []
    for i in ids:
        if i not in seen:
            seen.append(i)
    return seen


def _check_authors(author_ids: List[int]) -> None:
    found = set(
        Author.objects.filter(pk__in=author_ids).values_list("pk", flat=True)
    )
    for author_id in author_ids:
        if author_id not in found:
            raise ReferenceMissing(
                f"Автор с id {author_id} не найден", author_id=author_id
            )


def _isbn_taken(isbn: str, exclude_book_id: Optional[int] = None) -> bool:
    qs = Book.objects.filter(isbn=isbn)
    if exclude_book_id is not None:
        qs = qs.exclude(pk=exclude_book_id)
    return qs.exists()


def _save_book(book: Book, **kwargs) -> None:
    try:
        with transaction.atomic():
            book.save(**kwargs)
    except IntegrityError:
        raise IsbnTaken(isbn=book.isbn) from None


def _link_authors(book: Book, author_ids: List[int]) -> None:
    WrittenBy.objects.bulk_create(
        [WrittenBy(book=book, author_id=aid) for aid in author_ids]
    )


# ---------------------------------------------------------------------------
# Авторы
# ---------------------------------------------------------------------------

def create_author(name: str) -> Author:
    return Author.objects.create(name=name)


def update_author(author_id: int, name: str) -> Author:
    author = Author.objects.filter(pk=author_id).first()
    if author is None:
        raise NotFound("Автор не найден", author_id=author_id)
    author.name = name
    author.save(update_fields=["name"])
    return author


def delete_author(author_id: int) -> None:
    deleted, _ = Author.objects.filter(pk=author_id).delete()
    if not deleted:
        raise NotFound("Автор не найден", author_id=author_id)


# ---------------------------------------------------------------------------
# Книги
# ---------------------------------------------------------------------------

@transaction.atomic
def create_book(data: BookData) -> Book:
    """
    Добавить книгу и связи с авторами.

    Дата поступления ставится текущей и больше не меняется.

    Raises:
        ReferenceMissing: один из авторов не существует.
        IsbnTaken: ISBN уже занят.
    """
    author_ids = _unique_ids(data.author_ids)
    _check_authors(author_ids)
    if _isbn_taken(data.isbn):
        raise IsbnTaken(isbn=data.isbn)

    book = Book(
        title=data.title,
        isbn=data.isbn,
        publish_date=data.publish_date,
        quantity=data.quantity,
        rating=data.rating,
    )
    _save_book(book)
    _link_authors(book, author_ids)
    logger.info("Book %s (%s) added", book.pk, book.isbn)
    return book


@transaction.atomic
def update_book(book_id: int, data: BookData) -> Book:
    """Заменить поля книги (кроме даты поступления) и список авторов."""
    book = Book.objects.select_for_update().filter(pk=book_id).first()
    if book is None:
        raise NotFound("Книга не найдена", book_id=book_id)

    author_ids = _unique_ids(data.author_ids)
    _check_authors(author_ids)
    if _isbn_taken(data.isbn, exclude_book_id=book_id):
        raise IsbnTaken(isbn=data.isbn)

    book.title = data.title
    book.isbn = data.isbn
    book.publish_date = data.publish_date
    book.quantity = data.quantity
    book.rating = data.rating
    _save_book(book, update_fields=[
        "title", "isbn", "publish_date", "quantity", "rating",
    ])

    WrittenBy.objects.filter(book=book).delete()
    _link_authors(book, author_ids)
    return book


def delete_book(book_id: int) -> None:
    """Удалить книгу; связи с авторами и выдачи удаляются каскадно."""
    deleted, _ = Book.objects.filter(pk=book_id).delete()
    if not deleted:
        raise NotFound("Книга не найдена", book_id=book_id)
    logger.info("Book %s deleted", book_id)
