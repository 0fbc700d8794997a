from http import HTTPStatus

from librarian.forms import HallForm
from librarian.models import Hall
from librarian.payloads import hall_payload
from librarian.services.errors import NotFound
from librarian.services.halls import HallData, create_hall, delete_hall, update_hall
from librarian.views.common import (
    api_view,
    form_error_response,
    json_response,
    no_content,
    parse_json,
)


def _hall_data(form: HallForm) -> HallData:
    # taken_capacity во входных данных игнорируется
    return HallData(
        library_name=form.cleaned_data["library_name"],
        name=form.cleaned_data["name"],
        total_capacity=form.cleaned_data["total_capacity"],
        specification=form.cleaned_data["specification"],
    )


@api_view(["GET", "POST"])
def hall_list(request):
    if request.method == "GET":
        halls = Hall.objects.order_by("library_name", "name", "pk")
        return json_response([hall_payload(h) for h in halls])

    form = HallForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    hall = create_hall(_hall_data(form))
    return json_response(hall_payload(hall), status=HTTPStatus.CREATED)


@api_view(["GET", "PUT", "DELETE"])
def hall_detail(request, pk):
    if request.method == "GET":
        hall = Hall.objects.filter(pk=pk).first()
        if hall is None:
            raise NotFound("Зал не найден", hall_id=pk)
        return json_response(hall_payload(hall))

    if request.method == "DELETE":
        delete_hall(pk)
        return no_content()

    form = HallForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    hall = update_hall(pk, _hall_data(form))
    return json_response(hall_payload(hall))
