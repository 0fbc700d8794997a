from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from librarian.models import Hall
from librarian.services.capacity import lock_halls, occupancy
from librarian.services.errors import (
    CapacityBelowOccupancy,
    HallOccupied,
    NotFound,
)

logger = logging.getLogger(__name__)


@dataclass
class HallData:
    library_name: str
    name: str
    total_capacity: int
    specification: str = ""


def create_hall(data: HallData) -> Hall:
    hall = Hall.objects.create(
        library_name=data.library_name,
        name=data.name,
        total_capacity=data.total_capacity,
        taken_capacity=0,
        specification=data.specification,
    )
    logger.info("Hall %s created (capacity %s)", hall.pk, hall.total_capacity)
    return hall


@transaction.atomic
def update_hall(hall_id: int, data: HallData) -> Hall:
    """
    Изменить зал. taken_capacity из входных данных не берётся.

    Raises:
        NotFound: зала нет.
        CapacityBelowOccupancy: новая вместимость меньше занятости.
    """
    hall = lock_halls(hall_id).get(hall_id)
    if hall is None:
        raise NotFound("Зал не найден", hall_id=hall_id)

    taken = occupancy(hall_id)
    if data.total_capacity < taken:
        logger.warning(
            "Hall %s capacity %s rejected: %s readers assigned",
            hall_id, data.total_capacity, taken,
        )
        raise CapacityBelowOccupancy(
            hall_id=hall_id,
            total_capacity=data.total_capacity,
            taken_capacity=taken,
        )

    hall.library_name = data.library_name
    hall.name = data.name
    hall.total_capacity = data.total_capacity
    hall.specification = data.specification
    # занятость пишется тем же UPDATE, что и новая вместимость
    hall.taken_capacity = taken
    hall.save(update_fields=[
        "library_name", "name", "total_capacity", "taken_capacity",
        "specification",
    ])
    return hall


@transaction.atomic
def delete_hall(hall_id: int) -> None:
    hall = lock_halls(hall_id).get(hall_id)
    if hall is None:
        raise NotFound("Зал не найден", hall_id=hall_id)

    taken = occupancy(hall_id)
    if taken:
        raise HallOccupied(hall_id=hall_id, taken_capacity=taken)

    hall.delete()
    logger.info("Hall %s deleted", hall_id)
