from datetime import date

import pytest

from librarian.models import Author, Book, Role
from librarian.services.accounts import AccountDraft, create_account
from librarian.services.clock import FixedClock
from librarian.services.halls import HallData, create_hall


@pytest.fixture
def clock():
    return FixedClock(date(2024, 6, 1))


@pytest.fixture
def make_hall(db):
    def _make(total_capacity=2, name="Зал 1", library_name="Центральная"):
        return create_hall(
            HallData(
                library_name=library_name,
                name=name,
                total_capacity=total_capacity,
            )
        )
    return _make


@pytest.fixture
def make_account(db):
    counter = {"n": 0}

    def _make(role_id=Role.READER, hall=None, login=None, **extra):
        counter["n"] += 1
        draft = AccountDraft(
            login=login or f"user{counter['n']}",
            password="secret-pass",
            role_id=role_id,
            full_name=f"Читатель {counter['n']}",
            phone="+79000000000",
            hall_id=hall.pk if hall is not None else None,
            **extra,
        )
        return create_account(draft)
    return _make


@pytest.fixture
def admin(make_account):
    return make_account(role_id=Role.ADMIN, login="admin")


@pytest.fixture
def author(db):
    return Author.objects.create(name="Лев Толстой")


@pytest.fixture
def book(db):
    return Book.objects.create(title="Война и мир", isbn="9785170906307")
