import pytest

from librarian.models import Hall
from librarian.services.errors import CapacityBelowOccupancy, HallOccupied, NotFound
from librarian.services.halls import HallData, create_hall, delete_hall, update_hall


def _data(hall, **overrides):
    fields = {
        "library_name": hall.library_name,
        "name": hall.name,
        "total_capacity": hall.total_capacity,
        "specification": hall.specification,
    }
    fields.update(overrides)
    return HallData(**fields)


@pytest.mark.django_db
def test_create_forces_zero_taken():
    hall = create_hall(HallData(library_name="Городская", name="Малый", total_capacity=10))
    assert hall.taken_capacity == 0
    assert Hall.objects.get(pk=hall.pk).taken_capacity == 0


@pytest.mark.django_db
def test_reduce_below_occupancy_rejected(make_hall, make_account):
    hall = make_hall(total_capacity=3)
    make_account(hall=hall)
    make_account(hall=hall)

    with pytest.raises(CapacityBelowOccupancy) as exc_info:
        update_hall(hall.pk, _data(hall, total_capacity=1, name="Другое"))

    assert exc_info.value.details["taken_capacity"] == 2
    hall.refresh_from_db()
    assert hall.total_capacity == 3
    assert hall.name == "Зал 1"


@pytest.mark.django_db
def test_reduce_to_occupancy_allowed(make_hall, make_account):
    hall = make_hall(total_capacity=3)
    make_account(hall=hall)

    updated = update_hall(hall.pk, _data(hall, total_capacity=1))

    assert updated.total_capacity == 1
    assert updated.taken_capacity == 1


@pytest.mark.django_db
def test_update_rederives_stale_taken(make_hall, make_account):
    hall = make_hall(total_capacity=5)
    make_account(hall=hall)
    Hall.objects.filter(pk=hall.pk).update(taken_capacity=4)

    updated = update_hall(hall.pk, _data(hall, total_capacity=2))

    assert updated.taken_capacity == 1
    assert Hall.objects.get(pk=hall.pk).taken_capacity == 1


@pytest.mark.django_db
def test_update_missing_hall():
    with pytest.raises(NotFound):
        update_hall(404, HallData(library_name="x", name="y", total_capacity=1))


@pytest.mark.django_db
def test_delete_occupied_hall_rejected(make_hall, make_account):
    hall = make_hall()
    make_account(hall=hall)
    with pytest.raises(HallOccupied):
        delete_hall(hall.pk)
    assert Hall.objects.filter(pk=hall.pk).exists()


@pytest.mark.django_db
def test_delete_empty_hall(make_hall):
    hall = make_hall()
    delete_hall(hall.pk)
    assert not Hall.objects.filter(pk=hall.pk).exists()
    with pytest.raises(NotFound):
        delete_hall(hall.pk)
