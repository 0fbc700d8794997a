from librarian.views.accounts import (
    account_detail,
    account_list,
    role_detail,
    role_list,
    status_detail,
    status_list,
)
from librarian.views.catalog import (
    author_detail,
    author_list,
    book_detail,
    book_list,
)
from librarian.views.halls import hall_detail, hall_list
from librarian.views.loans import (
    dashboard_stats,
    loan_detail,
    loan_list,
    loan_recent,
    loan_return,
    loans_for_account,
    loans_for_book,
)

__all__ = [
    "account_detail",
    "account_list",
    "author_detail",
    "author_list",
    "book_detail",
    "book_list",
    "dashboard_stats",
    "hall_detail",
    "hall_list",
    "loan_detail",
    "loan_list",
    "loan_recent",
    "loan_return",
    "loans_for_account",
    "loans_for_book",
    "role_detail",
    "role_list",
    "status_detail",
    "status_list",
]
