import pytest
from django.db import IntegrityError, transaction

from librarian.models import Hall, Profile
from librarian.services.accounts import AccountChanges, delete_account, update_account
from librarian.services.capacity import (
    can_assign,
    find_drift,
    occupancy,
    recompute_all,
    recompute_taken_capacity,
)


@pytest.mark.django_db
def test_recompute_counts_assigned_profiles(make_hall, make_account):
    hall = make_hall(total_capacity=3)
    make_account(hall=hall)
    make_account(hall=hall)
    Hall.objects.filter(pk=hall.pk).update(taken_capacity=0)

    assert recompute_taken_capacity(hall.pk) == 2
    hall.refresh_from_db()
    assert hall.taken_capacity == 2


@pytest.mark.django_db
def test_recompute_missing_hall_is_noop():
    assert recompute_taken_capacity(999) is None


@pytest.mark.django_db
def test_can_assign_respects_total(make_hall, make_account):
    hall = make_hall(total_capacity=1)
    assert can_assign(hall.pk)
    reader = make_account(hall=hall)
    assert not can_assign(hall.pk)
    # собственное место читателя не мешает ему остаться в зале
    assert can_assign(hall.pk, exclude_account_id=reader.pk)


@pytest.mark.django_db
def test_can_assign_missing_hall():
    assert can_assign(12345) is False


@pytest.mark.django_db
def test_occupancy_excludes_account(make_hall, make_account):
    hall = make_hall(total_capacity=5)
    first = make_account(hall=hall)
    make_account(hall=hall)
    assert occupancy(hall.pk) == 2
    assert occupancy(hall.pk, exclude_account_id=first.pk) == 1


@pytest.mark.django_db
def test_recompute_all_repairs_drift(make_hall, make_account):
    hall = make_hall(total_capacity=4)
    other = make_hall(total_capacity=4, name="Зал 2")
    make_account(hall=hall)
    Hall.objects.filter(pk=hall.pk).update(taken_capacity=3)

    drifts = recompute_all()

    broken = [d for d in drifts if not d.is_consistent]
    assert [(d.hall_id, d.stored, d.actual) for d in broken] == [(hall.pk, 3, 1)]
    assert {d.hall_id for d in drifts} == {hall.pk, other.pk}
    assert all(d.is_consistent for d in find_drift())


@pytest.mark.django_db
def test_taken_cannot_exceed_total_in_database(make_hall):
    hall = make_hall(total_capacity=1)
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Hall.objects.filter(pk=hall.pk).update(taken_capacity=2)


@pytest.mark.django_db
def test_profile_count_matches_after_mixed_operations(make_hall, make_account):
    a = make_hall(total_capacity=3, name="A")
    b = make_hall(total_capacity=3, name="B")
    r1 = make_account(hall=a)
    r2 = make_account(hall=a)
    make_account(hall=b)
    update_account(r1.pk, AccountChanges(hall_id=b.pk))
    delete_account(r2.pk)

    for hall in Hall.objects.all():
        assert hall.taken_capacity == Profile.objects.filter(hall=hall).count()
