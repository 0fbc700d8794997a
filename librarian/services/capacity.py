"""
Учёт занятости читальных залов.

``Hall.taken_capacity`` — производное значение: число анкет, закреплённых
за залом. Его никогда не увеличивают и не уменьшают на месте, а только
пересчитывают по анкетам.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from django.db import transaction

from librarian.models import Hall, Profile

logger = logging.getLogger(__name__)


@dataclass
class CapacityDrift:
    """Расхождение сохранённой занятости зала с фактической."""

    hall_id: int
    stored: int
    actual: int

    @property
    def is_consistent(self) -> bool:
        return self.stored == self.actual


def occupancy(hall_id: int, exclude_account_id: Optional[int] = None) -> int:
    """
    Посчитать анкеты, закреплённые за залом.

    Args:
        hall_id: id зала.
        exclude_account_id: учётная запись, чьё место не учитывается
            (редактирование читателя, который уже сидит в этом зале).
    """
    qs = Profile.objects.filter(hall_id=hall_id)
    if exclude_account_id is not None:
        qs = qs.exclude(account_id=exclude_account_id)
    return qs.count()


def can_assign(hall_id: int, exclude_account_id: Optional[int] = None) -> bool:
    """Есть ли в зале свободное место. Для несуществующего зала — False."""
    hall = Hall.objects.filter(pk=hall_id).first()
    if hall is None:
        return False
    return occupancy(hall_id, exclude_account_id) < hall.total_capacity


def recompute_taken_capacity(hall_id: int) -> Optional[int]:
    """
    Пересчитать и сохранить занятость зала.

    Returns:
        Новое значение taken_capacity или None, если зала нет.
    """
    if not Hall.objects.filter(pk=hall_id).exists():
        return None
    taken = occupancy(hall_id)
    Hall.objects.filter(pk=hall_id).update(taken_capacity=taken)
    return taken


def lock_halls(*hall_ids: Optional[int]) -> Dict[int, Hall]:
    """
    Заблокировать строки залов до конца текущей транзакции.

    Вызывается только внутри transaction.atomic(). Строки берутся
    в порядке id, чтобы параллельные запросы не ловили взаимную
    блокировку. None среди id пропускается.
    """
    ids = sorted({hid for hid in hall_ids if hid is not None})
    if not ids:
        return {}
    rows = Hall.objects.select_for_update().filter(pk__in=ids).order_by("pk")
    return {hall.pk: hall for hall in rows}


def find_drift(hall_ids: Optional[Iterable[int]] = None) -> List[CapacityDrift]:
    """Сравнить сохранённую занятость залов с фактической."""
    qs = Hall.objects.order_by("pk")
    if hall_ids is not None:
        qs = qs.filter(pk__in=list(hall_ids))
    return [
        CapacityDrift(
            hall_id=hall.pk,
            stored=hall.taken_capacity,
            actual=occupancy(hall.pk),
        )
        for hall in qs
    ]


@transaction.atomic
def recompute_all(hall_ids: Optional[Iterable[int]] = None) -> List[CapacityDrift]:
    """
    Исправить занятость всех (или указанных) залов.

    Returns:
        Расхождения, найденные до исправления.
    """
    ids = list(hall_ids) if hall_ids is not None else None
    locked = lock_halls(*(ids if ids is not None else
                          Hall.objects.values_list("pk", flat=True)))
    drifts = find_drift(locked.keys())
    for drift in drifts:
        if not drift.is_consistent:
            recompute_taken_capacity(drift.hall_id)
            logger.warning(
                "Hall %s taken_capacity repaired: %s -> %s",
                drift.hall_id, drift.stored, drift.actual,
            )
    return drifts
