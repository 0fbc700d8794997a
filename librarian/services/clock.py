from __future__ import annotations

from datetime import date
from typing import Protocol

from django.utils import timezone


class Clock(Protocol):
    """Источник текущей даты (UTC, без времени суток)."""

    def today(self) -> date:
        ...


class SystemClock:
    def today(self) -> date:
        return timezone.now().date()


class FixedClock:
    """Часы с зафиксированной датой (тесты, команды с --today)."""

    def __init__(self, current: date) -> None:
        self.current = current

    def today(self) -> date:
        return self.current
