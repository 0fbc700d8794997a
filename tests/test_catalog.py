from datetime import date

import pytest

from librarian.models import Author, Book, Loan, Status, WrittenBy
from librarian.services.catalog import (
    BookData,
    create_author,
    create_book,
    delete_author,
    delete_book,
    update_author,
    update_book,
)
from librarian.services.errors import IsbnTaken, NotFound, ReferenceMissing


def _author_ids(book):
    return sorted(
        WrittenBy.objects.filter(book=book).values_list("author_id", flat=True)
    )


@pytest.mark.django_db
def test_create_book_links_authors(author):
    second = create_author("Фёдор Достоевский")

    book = create_book(
        BookData(
            title="Сборник",
            isbn="9780000000001",
            quantity=3,
            rating=4.5,
            author_ids=[author.pk, second.pk, author.pk],
        )
    )

    assert _author_ids(book) == sorted([author.pk, second.pk])
    assert book.admission_date is not None
    assert set(author.books.all()) == {book}


@pytest.mark.django_db
def test_create_book_with_missing_author(author):
    with pytest.raises(ReferenceMissing) as exc_info:
        create_book(
            BookData(title="Нет", isbn="9780000000002", author_ids=[author.pk, 555])
        )
    assert exc_info.value.details == {"author_id": 555}
    assert not Book.objects.filter(isbn="9780000000002").exists()


@pytest.mark.django_db
def test_duplicate_isbn(book):
    with pytest.raises(IsbnTaken):
        create_book(BookData(title="Копия", isbn=book.isbn))


@pytest.mark.django_db
def test_update_book_replaces_authors_and_keeps_admission(author, book):
    WrittenBy.objects.create(book=book, author=author)
    admitted = book.admission_date
    other = Author.objects.create(name="Антон Чехов")

    updated = update_book(
        book.pk,
        BookData(
            title="Война и мир. Том 1",
            isbn=book.isbn,
            publish_date=date(1869, 1, 1),
            author_ids=[other.pk],
        ),
    )

    updated.refresh_from_db()
    assert updated.title == "Война и мир. Том 1"
    assert updated.admission_date == admitted
    assert _author_ids(updated) == [other.pk]


@pytest.mark.django_db
def test_update_book_isbn_conflict(book):
    other = create_book(BookData(title="Другая", isbn="9780000000003"))
    with pytest.raises(IsbnTaken):
        update_book(other.pk, BookData(title="Другая", isbn=book.isbn))
    with pytest.raises(NotFound):
        update_book(9999, BookData(title="x", isbn="1"))


@pytest.mark.django_db
def test_delete_book_cascades(author, book, make_account):
    WrittenBy.objects.create(book=book, author=author)
    Loan.objects.create(
        book=book,
        account=make_account(),
        issuance_date=date(2024, 1, 1),
        due_date=date(2024, 2, 1),
        status_id=Status.ISSUED,
    )

    delete_book(book.pk)

    assert WrittenBy.objects.count() == 0
    assert Loan.objects.count() == 0
    assert Author.objects.filter(pk=author.pk).exists()
    with pytest.raises(NotFound):
        delete_book(book.pk)


@pytest.mark.django_db
def test_author_update_and_delete(author):
    assert update_author(author.pk, "Л. Н. Толстой").name == "Л. Н. Толстой"
    delete_author(author.pk)
    with pytest.raises(NotFound):
        update_author(author.pk, "x")
    with pytest.raises(NotFound):
        delete_author(author.pk)


@pytest.mark.django_db
def test_isbn_race_reports_conflict(book, monkeypatch):
    monkeypatch.setattr(
        "librarian.services.catalog._isbn_taken", lambda *a, **kw: False
    )
    other = Book.objects.create(title="Другая", isbn="9780000000004")

    with pytest.raises(IsbnTaken):
        create_book(BookData(title="Копия", isbn=book.isbn))
    with pytest.raises(IsbnTaken):
        update_book(other.pk, BookData(title="Другая", isbn=book.isbn))

    assert Book.objects.filter(isbn=book.isbn).count() == 1
