"""
Общие части JSON API: разбор тела запроса, ответы с ошибками
и перевод отказов бизнес-правил в HTTP-коды.
"""

from __future__ import annotations

import functools
import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, Iterable, Type

from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from librarian.services.errors import (
    Conflict,
    ConstraintViolation,
    LibraryError,
    NotFound,
    ReferenceMissing,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: Dict[Type[LibraryError], int] = {
    NotFound: HTTPStatus.NOT_FOUND,
    ReferenceMissing: HTTPStatus.BAD_REQUEST,
    ConstraintViolation: HTTPStatus.BAD_REQUEST,
    Conflict: HTTPStatus.CONFLICT,
}


class BadPayload(Exception):
    """Тело запроса не является JSON-объектом."""


def status_for(error: LibraryError) -> int:
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return HTTPStatus.BAD_REQUEST


def parse_json(request: HttpRequest) -> Dict[str, Any]:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BadPayload(f"Некорректный JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise BadPayload("Ожидается JSON-объект")
    return payload


def error_response(
    code: str,
    message: str,
    status: int,
    details: Any = None,
) -> JsonResponse:
    return JsonResponse(
        {"code": code, "message": message, "details": details or {}},
        status=status,
    )


def form_error_response(form) -> JsonResponse:
    return error_response(
        "validation_error",
        "Некорректные данные запроса",
        HTTPStatus.BAD_REQUEST,
        details=form.errors.get_json_data(),
    )


def json_response(data: Any, status: int = HTTPStatus.OK) -> JsonResponse:
    return JsonResponse(data, status=status, safe=False)


def no_content() -> HttpResponse:
    return HttpResponse(status=HTTPStatus.NO_CONTENT)


def api_view(methods: Iterable[str]) -> Callable:
    """
    Обернуть представление JSON API.

    Ограничивает методы, отключает CSRF (клиент — отдельное SPA)
    и превращает отказы сервисов в JSON-ответы с кодом ошибки.
    """
    def decorator(view: Callable) -> Callable:
        @csrf_exempt
        @require_http_methods(list(methods))
        @functools.wraps(view)
        def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            try:
                return view(request, *args, **kwargs)
            except BadPayload as exc:
                return error_response(
                    "bad_payload", str(exc), HTTPStatus.BAD_REQUEST
                )
            except LibraryError as exc:
                return error_response(
                    exc.code, exc.message, status_for(exc), exc.details
                )
            except DatabaseError:
                logger.exception(
                    "Database failure on %s %s", request.method, request.path
                )
                return error_response(
                    "internal_error",
                    "Внутренняя ошибка сервера",
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                )
        return wrapper
    return decorator
