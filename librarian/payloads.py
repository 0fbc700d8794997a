"""Представление моделей в JSON-ответах."""

from typing import Any, Dict

from librarian.models import Account, Author, Book, Hall, Loan, Role, Status


def author_payload(author: Author) -> Dict[str, Any]:
    return {"id": author.pk, "name": author.name}


def book_payload(book: Book) -> Dict[str, Any]:
    return {
        "id": book.pk,
        "title": book.title,
        "isbn": book.isbn,
        "publish_date": book.publish_date,
        "admission_date": book.admission_date,
        "quantity": book.quantity,
        "rating": book.rating,
        "author_ids": sorted(w.author_id for w in book.written_by.all()),
    }


def hall_payload(hall: Hall) -> Dict[str, Any]:
    return {
        "id": hall.pk,
        "library_name": hall.library_name,
        "name": hall.name,
        "total_capacity": hall.total_capacity,
        "taken_capacity": hall.taken_capacity,
        "specification": hall.specification,
    }


def role_payload(role: Role) -> Dict[str, Any]:
    return {"id": role.pk, "name": role.name}


def status_payload(status: Status) -> Dict[str, Any]:
    return {"id": status.pk, "name": status.name}


def account_payload(account: Account) -> Dict[str, Any]:
    profile = account.profile
    return {
        "id": account.pk,
        "login": account.login,
        "role": role_payload(account.role),
        "profile": {
            "full_name": profile.full_name,
            "phone": profile.phone,
            "ticket_number": profile.ticket_number,
            "birthday": profile.birthday,
            "education": profile.education,
            "hall_id": profile.hall_id,
        },
    }


def loan_payload(loan: Loan) -> Dict[str, Any]:
    return {
        "book_id": loan.book_id,
        "account_id": loan.account_id,
        "issuance_date": loan.issuance_date,
        "due_date": loan.due_date,
        "status_id": loan.status_id,
        "book_title": loan.book.title,
        "account_login": loan.account.login,
        "status_name": loan.status.name,
    }
