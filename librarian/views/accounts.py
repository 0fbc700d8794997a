from http import HTTPStatus

from librarian.forms import AccountCreateForm, AccountUpdateForm
from librarian.models import Account, Role, Status
from librarian.payloads import account_payload, role_payload, status_payload
from librarian.services.accounts import (
    AccountChanges,
    AccountDraft,
    create_account,
    delete_account,
    update_account,
)
from librarian.services.errors import NotFound
from librarian.views.common import (
    api_view,
    form_error_response,
    json_response,
    no_content,
    parse_json,
)


def _accounts():
    return Account.objects.select_related("role", "profile")


def _get_account(pk: int) -> Account:
    account = _accounts().filter(pk=pk).first()
    if account is None:
        raise NotFound("Пользователь не найден", account_id=pk)
    return account


@api_view(["GET", "POST"])
def account_list(request):
    if request.method == "GET":
        accounts = _accounts().order_by("login")
        return json_response([account_payload(a) for a in accounts])

    form = AccountCreateForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    account = create_account(AccountDraft(**form.cleaned_data))
    return json_response(
        account_payload(_get_account(account.pk)), status=HTTPStatus.CREATED
    )


@api_view(["GET", "PUT", "DELETE"])
def account_detail(request, pk):
    if request.method == "GET":
        return json_response(account_payload(_get_account(pk)))

    if request.method == "DELETE":
        delete_account(pk)
        return no_content()

    form = AccountUpdateForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    update_account(pk, AccountChanges(**form.cleaned_data))
    return json_response(account_payload(_get_account(pk)))


@api_view(["GET"])
def role_list(request):
    return json_response([role_payload(r) for r in Role.objects.order_by("pk")])


@api_view(["GET"])
def role_detail(request, pk):
    role = Role.objects.filter(pk=pk).first()
    if role is None:
        raise NotFound("Роль не найдена", role_id=pk)
    return json_response(role_payload(role))


@api_view(["GET"])
def status_list(request):
    return json_response(
        [status_payload(s) for s in Status.objects.order_by("pk")]
    )


@api_view(["GET"])
def status_detail(request, pk):
    status = Status.objects.filter(pk=pk).first()
    if status is None:
        raise NotFound("Статус не найден", status_id=pk)
    return json_response(status_payload(status))
