from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from librarian.models import Account, Author, Book, Loan, Status
from librarian.services.clock import Clock
from librarian.services.loans import LoanManager


@dataclass
class LibraryStats:
    """Сводка для дэшборда."""

    total_books: int
    total_authors: int
    total_accounts: int
    total_loans: int
    overdue_loans: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def library_stats(clock: Optional[Clock] = None) -> LibraryStats:
    """Собрать сводку; просроченные выдачи предварительно помечаются."""
    LoanManager(clock).sweep_overdue()
    return LibraryStats(
        total_books=Book.objects.count(),
        total_authors=Author.objects.count(),
        total_accounts=Account.objects.count(),
        total_loans=Loan.objects.count(),
        overdue_loans=Loan.objects.filter(status_id=Status.OVERDUE).count(),
    )
