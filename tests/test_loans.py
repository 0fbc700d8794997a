from datetime import date

import pytest

from librarian.models import Book, Loan, Status
from librarian.services.clock import FixedClock
from librarian.services.errors import (
    InvalidLoanDates,
    InvalidTransition,
    LoanExists,
    NotFound,
    ReferenceMissing,
)
from librarian.services.loans import LoanManager


@pytest.fixture
def manager(clock):
    return LoanManager(clock)


@pytest.fixture
def reader(make_account):
    return make_account()


def _status(book, reader):
    return Loan.objects.get(book=book, account=reader).status_id


@pytest.mark.django_db
def test_issue_defaults_to_today_and_issued(manager, book, reader):
    loan = manager.issue(book.pk, reader.pk, due_date=date(2024, 6, 15))
    assert loan.issuance_date == date(2024, 6, 1)
    assert loan.status_id == Status.ISSUED
    assert loan.book.title == book.title


@pytest.mark.django_db
def test_issue_missing_references(manager, book, reader):
    due = date(2024, 7, 1)
    with pytest.raises(ReferenceMissing):
        manager.issue(9999, reader.pk, due_date=due)
    with pytest.raises(ReferenceMissing):
        manager.issue(book.pk, 9999, due_date=due)
    with pytest.raises(ReferenceMissing):
        manager.issue(book.pk, reader.pk, due_date=due, status_id=42)
    assert Loan.objects.count() == 0


@pytest.mark.django_db
def test_issue_due_before_issuance(manager, book, reader):
    with pytest.raises(InvalidLoanDates):
        manager.issue(
            book.pk,
            reader.pk,
            due_date=date(2024, 5, 1),
            issuance_date=date(2024, 5, 10),
        )


@pytest.mark.django_db
def test_reissue_same_pair_is_conflict(manager, book, reader):
    manager.issue(book.pk, reader.pk, due_date=date(2024, 7, 1))
    manager.mark_returned(book.pk, reader.pk)

    with pytest.raises(LoanExists) as exc_info:
        manager.issue(book.pk, reader.pk, due_date=date(2024, 8, 1))

    assert exc_info.value.code == "loan_exists"
    assert _status(book, reader) == Status.RETURNED


@pytest.mark.django_db
def test_same_book_to_different_readers(manager, book, make_account):
    book.quantity = 1
    book.save()
    first = make_account()
    second = make_account()
    manager.issue(book.pk, first.pk, due_date=date(2024, 7, 1))
    manager.issue(book.pk, second.pk, due_date=date(2024, 7, 1))
    assert Loan.objects.filter(book=book).count() == 2


@pytest.mark.django_db
def test_overdue_scenario(manager, reader):
    book = Book.objects.create(title="Идиот", isbn="9785041040")
    Loan.objects.create(
        book=book,
        account=reader,
        issuance_date=date(2023, 12, 1),
        due_date=date(2024, 1, 1),
        status_id=Status.ISSUED,
    )

    loans = manager.list_all()

    assert [(l.book_id, l.status_id) for l in loans] == [(book.pk, Status.OVERDUE)]
    assert loans[0].status.name == "Задержана"
    # статус сохранён, а не только вычислен
    assert _status(book, reader) == Status.OVERDUE
    assert manager.list_for_book(book.pk)[0].status_id == Status.OVERDUE


@pytest.mark.django_db
def test_sweep_boundaries(manager, book, make_account):
    due_today = make_account()
    due_yesterday = make_account()
    returned = make_account()
    Loan.objects.create(book=book, account=due_today, issuance_date=date(2024, 5, 1),
                        due_date=date(2024, 6, 1), status_id=Status.ISSUED)
    Loan.objects.create(book=book, account=due_yesterday, issuance_date=date(2024, 5, 1),
                        due_date=date(2024, 5, 31), status_id=Status.ISSUED)
    Loan.objects.create(book=book, account=returned, issuance_date=date(2024, 1, 1),
                        due_date=date(2024, 1, 2), status_id=Status.RETURNED)

    assert manager.sweep_overdue() == 1

    assert _status(book, due_today) == Status.ISSUED
    assert _status(book, due_yesterday) == Status.OVERDUE
    assert _status(book, returned) == Status.RETURNED
    assert manager.sweep_overdue() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("accessor", ["list_all", "recent", "for_account", "for_book", "get"])
def test_every_read_sweeps(book, reader, accessor):
    Loan.objects.create(book=book, account=reader, issuance_date=date(2024, 1, 1),
                        due_date=date(2024, 2, 1), status_id=Status.ISSUED)
    manager = LoanManager(FixedClock(date(2024, 3, 1)))

    if accessor == "list_all":
        manager.list_all()
    elif accessor == "recent":
        manager.recent(limit=1)
    elif accessor == "for_account":
        manager.list_for_account(reader.pk)
    elif accessor == "for_book":
        manager.list_for_book(book.pk)
    else:
        assert manager.get(book.pk, reader.pk).status_id == Status.OVERDUE

    assert _status(book, reader) == Status.OVERDUE


@pytest.mark.django_db
def test_overdue_can_be_returned(manager, book, reader):
    Loan.objects.create(book=book, account=reader, issuance_date=date(2024, 1, 1),
                        due_date=date(2024, 2, 1), status_id=Status.ISSUED)
    manager.sweep_overdue()

    loan = manager.mark_returned(book.pk, reader.pk)

    assert loan.status_id == Status.RETURNED
    manager.sweep_overdue()
    assert _status(book, reader) == Status.RETURNED


@pytest.mark.django_db
@pytest.mark.parametrize(
    "start,target",
    [
        (Status.RETURNED, Status.ISSUED),
        (Status.RETURNED, Status.OVERDUE),
        (Status.OVERDUE, Status.ISSUED),
    ],
)
def test_forbidden_transitions(manager, book, reader, start, target):
    Loan.objects.create(book=book, account=reader, issuance_date=date(2024, 5, 1),
                        due_date=date(2024, 7, 1), status_id=start)
    with pytest.raises(InvalidTransition):
        manager.update(book.pk, reader.pk, status_id=target)
    assert _status(book, reader) == start


@pytest.mark.django_db
def test_update_due_date_and_unknown_status(manager, book, reader):
    manager.issue(book.pk, reader.pk, due_date=date(2024, 6, 10))

    loan = manager.update(book.pk, reader.pk, due_date=date(2024, 6, 20))
    assert loan.due_date == date(2024, 6, 20)

    with pytest.raises(ReferenceMissing):
        manager.update(book.pk, reader.pk, status_id=77)
    with pytest.raises(InvalidLoanDates):
        manager.update(book.pk, reader.pk, due_date=date(2024, 1, 1))


@pytest.mark.django_db
def test_recent_orders_by_issuance(manager, book, make_account):
    for day in (3, 1, 2):
        manager.issue(
            book.pk,
            make_account().pk,
            due_date=date(2024, 7, 1),
            issuance_date=date(2024, 5, day),
        )

    recent = manager.recent(limit=2)

    assert [l.issuance_date.day for l in recent] == [3, 2]


@pytest.mark.django_db
def test_get_and_delete_missing(manager, book, reader):
    with pytest.raises(NotFound):
        manager.get(book.pk, reader.pk)
    with pytest.raises(NotFound):
        manager.delete(book.pk, reader.pk)
    with pytest.raises(NotFound):
        manager.update(book.pk, reader.pk, status_id=Status.RETURNED)


@pytest.mark.django_db
def test_deleting_book_removes_loans(manager, book, reader):
    manager.issue(book.pk, reader.pk, due_date=date(2024, 7, 1))
    book.delete()
    assert Loan.objects.count() == 0
