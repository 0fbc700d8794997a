"""Выдачи. Все чтения идут через LoanManager, который сначала помечает просрочки."""

from http import HTTPStatus

from librarian.forms import LoanCreateForm, LoanUpdateForm
from librarian.models import Status
from librarian.payloads import loan_payload
from librarian.services.loans import LoanManager
from librarian.services.reporting import library_stats
from librarian.views.common import (
    api_view,
    form_error_response,
    json_response,
    no_content,
    parse_json,
)


def get_loan_manager() -> LoanManager:
    return LoanManager()


@api_view(["GET", "POST"])
def loan_list(request):
    manager = get_loan_manager()
    if request.method == "GET":
        return json_response([loan_payload(loan) for loan in manager.list_all()])

    form = LoanCreateForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    data = form.cleaned_data
    loan = manager.issue(
        book_id=data["book_id"],
        account_id=data["account_id"],
        due_date=data["due_date"],
        issuance_date=data["issuance_date"],
        status_id=data["status_id"] or Status.ISSUED,
    )
    return json_response(loan_payload(loan), status=HTTPStatus.CREATED)


@api_view(["GET"])
def loan_recent(request):
    loans = get_loan_manager().recent()
    return json_response([loan_payload(loan) for loan in loans])


@api_view(["GET"])
def loans_for_account(request, account_id):
    loans = get_loan_manager().list_for_account(account_id)
    return json_response([loan_payload(loan) for loan in loans])


@api_view(["GET"])
def loans_for_book(request, book_id):
    loans = get_loan_manager().list_for_book(book_id)
    return json_response([loan_payload(loan) for loan in loans])


@api_view(["GET", "PUT", "DELETE"])
def loan_detail(request, book_id, account_id):
    manager = get_loan_manager()
    if request.method == "GET":
        return json_response(loan_payload(manager.get(book_id, account_id)))

    if request.method == "DELETE":
        manager.delete(book_id, account_id)
        return no_content()

    form = LoanUpdateForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    loan = manager.update(
        book_id,
        account_id,
        due_date=form.cleaned_data["due_date"],
        status_id=form.cleaned_data["status_id"],
    )
    return json_response(loan_payload(loan))


@api_view(["POST"])
def loan_return(request, book_id, account_id):
    loan = get_loan_manager().mark_returned(book_id, account_id)
    return json_response(loan_payload(loan))


@api_view(["GET"])
def dashboard_stats(request):
    stats = library_stats(get_loan_manager().clock)
    return json_response(stats.as_dict())
