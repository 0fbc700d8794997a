"""
Жизненный цикл выдач.

Статус «Задержана» поддерживается без фонового процесса: каждое чтение
выдач сначала выполняет sweep_overdue(), который одним UPDATE переводит
просроченные «Выданные» записи в «Задержанные».

Переходы статусов:
    Выдана -> Возвращена, Выдана -> Задержана, Задержана -> Возвращена.
Из «Возвращена» выхода нет, в «Выдана» попадают только при создании.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, FrozenSet, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction

from librarian.models import Account, Book, Loan, Status
from librarian.services.clock import Clock, SystemClock
from librarian.services.errors import (
    InvalidLoanDates,
    InvalidTransition,
    LoanExists,
    NotFound,
    ReferenceMissing,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[int, FrozenSet[int]] = {
    Status.ISSUED: frozenset({Status.RETURNED, Status.OVERDUE}),
    Status.OVERDUE: frozenset({Status.RETURNED}),
    Status.RETURNED: frozenset(),
}


class LoanManager:
    """Операции над выдачами с внедряемыми часами."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or SystemClock()

    def sweep_overdue(self) -> int:
        """
        Перевести просроченные выдачи в статус «Задержана».

        Просроченной считается выдача в статусе «Выдана», срок которой
        строго раньше сегодняшней даты (UTC).

        Returns:
            Количество изменённых выдач.
        """
        today = self.clock.today()
        with transaction.atomic():
            swept = (
                Loan.objects.filter(status_id=Status.ISSUED, due_date__lt=today)
                .update(status_id=Status.OVERDUE)
            )
        if swept:
            logger.info("Marked %s loan(s) overdue as of %s", swept, today)
        return swept

    def _queryset(self):
        return Loan.objects.select_related("book", "account", "status")

    def list_all(self) -> List[Loan]:
        self.sweep_overdue()
        return list(self._queryset().order_by("-issuance_date", "pk"))

    def list_for_account(self, account_id: int) -> List[Loan]:
        self.sweep_overdue()
        return list(
            self._queryset()
            .filter(account_id=account_id)
            .order_by("-issuance_date", "pk")
        )

    def list_for_book(self, book_id: int) -> List[Loan]:
        self.sweep_overdue()
        return list(
            self._queryset()
            .filter(book_id=book_id)
            .order_by("-issuance_date", "pk")
        )

    def recent(self, limit: Optional[int] = None) -> List[Loan]:
        """Последние выдачи по дате выдачи."""
        if limit is None:
            limit = settings.LIBRARY["RECENT_LOANS"]
        self.sweep_overdue()
        return list(self._queryset().order_by("-issuance_date", "-pk")[:limit])

    def get(self, book_id: int, account_id: int) -> Loan:
        self.sweep_overdue()
        loan = self._queryset().filter(
            book_id=book_id, account_id=account_id
        ).first()
        if loan is None:
            raise NotFound(
                "Выдача не найдена", book_id=book_id, account_id=account_id
            )
        return loan

    @transaction.atomic
    def issue(
        self,
        book_id: int,
        account_id: int,
        due_date: date,
        issuance_date: Optional[date] = None,
        status_id: int = Status.ISSUED,
    ) -> Loan:
        """
        Выдать книгу.

        Наличие свободных экземпляров (Book.quantity) не проверяется.
        Повторная выдача той же книги тому же пользователю считается конфликтом,
        даже если прежняя выдача уже возвращена.

        Raises:
            ReferenceMissing: нет книги, пользователя или статуса.
            InvalidLoanDates: срок раньше даты выдачи.
            LoanExists: запись для пары уже есть.
        """
        if not Book.objects.filter(pk=book_id).exists():
            raise ReferenceMissing("Книга не найдена", book_id=book_id)
        if not Account.objects.filter(pk=account_id).exists():
            raise ReferenceMissing("Пользователь не найден", account_id=account_id)
        if not Status.objects.filter(pk=status_id).exists():
            raise ReferenceMissing("Статус не найден", status_id=status_id)

        issuance_date = issuance_date or self.clock.today()
        if due_date < issuance_date:
            raise InvalidLoanDates(
                issuance_date=issuance_date.isoformat(),
                due_date=due_date.isoformat(),
            )

        try:
            with transaction.atomic():
                loan = Loan.objects.create(
                    book_id=book_id,
                    account_id=account_id,
                    issuance_date=issuance_date,
                    due_date=due_date,
                    status_id=status_id,
                )
        except IntegrityError:
            raise LoanExists(book_id=book_id, account_id=account_id) from None

        logger.info(
            "Book %s issued to account %s until %s", book_id, account_id, due_date
        )
        return self._queryset().get(pk=loan.pk)

    @transaction.atomic
    def update(
        self,
        book_id: int,
        account_id: int,
        due_date: Optional[date] = None,
        status_id: Optional[int] = None,
    ) -> Loan:
        """Изменить срок и/или статус выдачи."""
        loan = (
            Loan.objects.select_for_update()
            .filter(book_id=book_id, account_id=account_id)
            .first()
        )
        if loan is None:
            raise NotFound(
                "Выдача не найдена", book_id=book_id, account_id=account_id
            )

        if status_id is not None and status_id != loan.status_id:
            if not Status.objects.filter(pk=status_id).exists():
                raise ReferenceMissing("Статус не найден", status_id=status_id)
            allowed = ALLOWED_TRANSITIONS.get(loan.status_id, frozenset())
            if status_id not in allowed:
                raise InvalidTransition(
                    from_status=loan.status_id, to_status=status_id
                )
            loan.status_id = status_id

        if due_date is not None:
            if due_date < loan.issuance_date:
                raise InvalidLoanDates(
                    issuance_date=loan.issuance_date.isoformat(),
                    due_date=due_date.isoformat(),
                )
            loan.due_date = due_date

        loan.save(update_fields=["status", "due_date"])
        return self._queryset().get(pk=loan.pk)

    def mark_returned(self, book_id: int, account_id: int) -> Loan:
        return self.update(book_id, account_id, status_id=Status.RETURNED)

    @transaction.atomic
    def delete(self, book_id: int, account_id: int) -> None:
        deleted, _ = Loan.objects.filter(
            book_id=book_id, account_id=account_id
        ).delete()
        if not deleted:
            raise NotFound(
                "Выдача не найдена", book_id=book_id, account_id=account_id
            )
