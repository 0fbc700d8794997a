"""
Типизированные отказы бизнес-правил.

Каждый отказ несёт стабильный машинный ``code``, понятное человеку
сообщение и ``details`` с идентификаторами, по которым видно,
какое именно ограничение не выполнено. Перевод в HTTP-коды делает
слой представлений.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LibraryError(Exception):
    """Базовый отказ операции."""

    code = "library_error"
    default_message = "Операция отклонена"

    def __init__(self, message: Optional[str] = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFound(LibraryError):
    code = "not_found"
    default_message = "Запись не найдена"


class ReferenceMissing(LibraryError):
    """Связанная сущность, указанная во входных данных, не существует."""

    code = "reference_missing"
    default_message = "Связанная запись не найдена"


class ConstraintViolation(LibraryError):
    code = "constraint_violation"
    default_message = "Нарушено ограничение"


class HallFull(ConstraintViolation):
    code = "hall_full"
    default_message = "Выбранный зал переполнен. Выберите другой зал."


class CapacityBelowOccupancy(ConstraintViolation):
    code = "capacity_below_occupancy"
    default_message = (
        "Вместимость зала не может быть меньше числа закреплённых читателей"
    )


class HallOccupied(ConstraintViolation):
    code = "hall_occupied"
    default_message = "Нельзя удалить зал, за которым закреплены читатели"


class LastAdmin(ConstraintViolation):
    code = "last_admin"
    default_message = "Нельзя удалить последнего администратора системы"


class InvalidTransition(ConstraintViolation):
    code = "invalid_transition"
    default_message = "Недопустимая смена статуса выдачи"


class InvalidLoanDates(ConstraintViolation):
    code = "invalid_loan_dates"
    default_message = "Срок возврата не может быть раньше даты выдачи"


class Conflict(LibraryError):
    code = "conflict"
    default_message = "Запись уже существует"


class LoanExists(Conflict):
    code = "loan_exists"
    default_message = "Эта книга уже выдавалась этому пользователю"


class LoginTaken(Conflict):
    code = "login_taken"
    default_message = "Логин уже занят"


class IsbnTaken(Conflict):
    code = "isbn_taken"
    default_message = "Книга с таким ISBN уже есть"
