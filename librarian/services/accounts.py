"""
Правила жизненного цикла учётных записей.

Каждая операция — одна транзакция: проверка, запись и пересчёт занятости
зала либо фиксируются вместе, либо откатываются целиком. Проверки
вместимости и числа администраторов выполняются после select_for_update
по строкам, которые они читают.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from django.db import IntegrityError, transaction

from librarian.models import Account, Profile, Role
from librarian.services.capacity import (
    can_assign,
    lock_halls,
    recompute_taken_capacity,
)
from librarian.services.errors import (
    HallFull,
    LastAdmin,
    LoginTaken,
    NotFound,
    ReferenceMissing,
)

logger = logging.getLogger(__name__)


@dataclass
class AccountDraft:
    """Данные новой учётной записи с анкетой."""

    login: str
    password: str
    role_id: int
    full_name: str
    phone: str
    ticket_number: str = ""
    birthday: Optional[date] = None
    education: str = ""
    hall_id: Optional[int] = None


@dataclass
class AccountChanges:
    """Частичное изменение: None означает «оставить как есть»."""

    login: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    ticket_number: Optional[str] = None
    birthday: Optional[date] = None
    education: Optional[str] = None
    hall_id: Optional[int] = None


def _login_taken(login: str, exclude_account_id: Optional[int] = None) -> bool:
    qs = Account.objects.filter(login=login)
    if exclude_account_id is not None:
        qs = qs.exclude(pk=exclude_account_id)
    return qs.exists()


def _save_account(account: Account) -> None:
    """Сохранить запись; гонка за логин превращается в LoginTaken."""
    try:
        with transaction.atomic():
            account.save()
    except IntegrityError:
        raise LoginTaken(login=account.login) from None


def _ensure_hall_has_seat(
    hall_id: int,
    exclude_account_id: Optional[int] = None,
) -> None:
    """Проверить зал, строка которого уже заблокирована вызывающим."""
    if not can_assign(hall_id, exclude_account_id):
        logger.warning("Hall %s is full, assignment rejected", hall_id)
        raise HallFull(hall_id=hall_id)


@transaction.atomic
def create_account(draft: AccountDraft) -> Account:
    """
    Создать учётную запись и анкету.

    Поля читателя (билет, дата рождения, образование, зал) сохраняются
    только для роли «Читатель».

    Raises:
        ReferenceMissing: нет роли или зала.
        LoginTaken: логин занят.
        HallFull: в зале нет свободных мест.
    """
    role = Role.objects.filter(pk=draft.role_id).first()
    if role is None:
        raise ReferenceMissing("Роль не найдена", role_id=draft.role_id)
    is_reader = role.pk == Role.READER
    hall_id = draft.hall_id if is_reader else None

    if _login_taken(draft.login):
        raise LoginTaken(login=draft.login)

    if hall_id is not None:
        if hall_id not in lock_halls(hall_id):
            raise ReferenceMissing("Зал не найден", hall_id=hall_id)
        _ensure_hall_has_seat(hall_id)

    account = Account(login=draft.login, role=role)
    account.set_password(draft.password)
    _save_account(account)
    Profile.objects.create(
        account=account,
        full_name=draft.full_name,
        phone=draft.phone,
        ticket_number=draft.ticket_number if is_reader else "",
        birthday=draft.birthday if is_reader else None,
        education=draft.education if is_reader else "",
        hall_id=hall_id,
    )

    if hall_id is not None:
        recompute_taken_capacity(hall_id)

    logger.info("Account %s (%s) created, hall=%s", account.pk, role, hall_id)
    return account


@transaction.atomic
def update_account(account_id: int, changes: AccountChanges) -> Account:
    """
    Изменить учётную запись. Роль не меняется.

    При переводе читателя в другой зал проверяется новый зал (без учёта
    собственного места), а после записи пересчитываются оба зала.
    """
    account = (
        Account.objects.select_for_update()
        .filter(pk=account_id)
        .first()
    )
    if account is None:
        raise NotFound("Пользователь не найден", account_id=account_id)
    profile = Profile.objects.select_for_update().get(account=account)

    old_hall_id = profile.hall_id
    new_hall_id = old_hall_id
    if account.is_reader and changes.hall_id is not None:
        new_hall_id = changes.hall_id

    if new_hall_id != old_hall_id:
        if new_hall_id not in lock_halls(old_hall_id, new_hall_id):
            raise ReferenceMissing("Зал не найден", hall_id=new_hall_id)
        _ensure_hall_has_seat(new_hall_id, exclude_account_id=account.pk)

    if changes.login and changes.login != account.login:
        if _login_taken(changes.login, exclude_account_id=account.pk):
            raise LoginTaken(login=changes.login)
        account.login = changes.login
    if changes.password:
        account.set_password(changes.password)
    _save_account(account)

    if changes.full_name is not None:
        profile.full_name = changes.full_name
    if changes.phone is not None:
        profile.phone = changes.phone
    if account.is_reader:
        if changes.ticket_number is not None:
            profile.ticket_number = changes.ticket_number
        if changes.birthday is not None:
            profile.birthday = changes.birthday
        if changes.education is not None:
            profile.education = changes.education
        profile.hall_id = new_hall_id
    profile.save()

    if old_hall_id is not None:
        recompute_taken_capacity(old_hall_id)
    if new_hall_id is not None and new_hall_id != old_hall_id:
        recompute_taken_capacity(new_hall_id)

    if new_hall_id != old_hall_id:
        logger.info(
            "Account %s moved from hall %s to hall %s",
            account.pk, old_hall_id, new_hall_id,
        )
    return account


@transaction.atomic
def delete_account(account_id: int) -> None:
    """
    Удалить учётную запись вместе с анкетой и выдачами.

    Raises:
        NotFound: записи нет.
        LastAdmin: удаляется единственный администратор.
    """
    role_id = (
        Account.objects.filter(pk=account_id)
        .values_list("role_id", flat=True)
        .first()
    )
    if role_id is None:
        raise NotFound("Пользователь не найден", account_id=account_id)

    if role_id == Role.ADMIN:
        admins = list(
            Account.objects.select_for_update()
            .filter(role_id=Role.ADMIN)
            .order_by("pk")
            .values_list("pk", flat=True)
        )
        if account_id not in admins:
            raise NotFound("Пользователь не найден", account_id=account_id)
        if len(admins) < 2:
            logger.warning("Refused to delete last admin %s", account_id)
            raise LastAdmin(account_id=account_id)

    account = Account.objects.select_for_update().filter(pk=account_id).first()
    if account is None:
        raise NotFound("Пользователь не найден", account_id=account_id)
    hall_id = (
        Profile.objects.filter(account=account)
        .values_list("hall_id", flat=True)
        .first()
    )
    lock_halls(hall_id)

    account.delete()
    if hall_id is not None:
        recompute_taken_capacity(hall_id)
    logger.info("Account %s deleted, hall=%s", account_id, hall_id)
