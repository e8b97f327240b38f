"""
problem_details.factory - Builds RFC 7807 payloads.

The factory is the only place that decides what a problem response looks
like.  It is instantiated once per process with the sealed options (see
``problem_details.settings.get_factory``) and is swappable through the
``FACTORY_CLASS`` setting.

Returning ``None`` from ``create_exception_problem_details`` in a subclass
suppresses conversion: the caller leaves the original result untouched.
"""

from __future__ import annotations

import logging
import traceback
import uuid
from http import HTTPStatus
from typing import Any

from django.core.exceptions import PermissionDenied, SuspiciousOperation
from django.http import Http404
from rest_framework import exceptions, status

from .options import ProblemDetailsOptions
from .problem import ProblemDetails, ValidationProblemDetails
from .responses import bind_status_code
from .settings import get_settings

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "One or more validation errors occurred."
NON_FIELD_ERRORS_KEY = "non_field_errors"

# Fallback classification for exceptions no configured rule claimed.
_BUILTIN_STATUS_MAP: dict[type, int] = {
    Http404:             status.HTTP_404_NOT_FOUND,
    PermissionDenied:    status.HTTP_403_FORBIDDEN,
    SuspiciousOperation: status.HTTP_400_BAD_REQUEST,
}


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Error"


def normalize_errors(errors: Any) -> dict[str, Any]:
    """
    Shape serializer / ``ValidationError`` detail as ``{field: [messages]}``.

    Lists and bare strings are filed under ``non_field_errors``; nested
    serializer errors are kept as nested dicts.
    """
    if isinstance(errors, dict):
        return {str(field): _normalize_messages(messages) for field, messages in errors.items()}
    if isinstance(errors, (list, tuple)):
        return {NON_FIELD_ERRORS_KEY: _normalize_messages(errors)}
    return {NON_FIELD_ERRORS_KEY: [_as_text(errors)]}


def _normalize_messages(messages: Any) -> Any:
    if isinstance(messages, dict):
        return normalize_errors(messages)
    if isinstance(messages, (list, tuple)):
        return [
            normalize_errors(message) if isinstance(message, dict) else _as_text(message)
            for message in messages
        ]
    return [_as_text(messages)]


def _as_text(message: Any) -> str:
    return str(message)


class ProblemDetailsFactory:
    """
    Default problem details factory.

    Args:
        options: The sealed ``ProblemDetailsOptions`` of the process.
    """

    def __init__(self, options: ProblemDetailsOptions) -> None:
        self.options = options

    # ── Plain problems ───────────────────────────────────────────────

    def create_problem_details(
        self,
        request: Any,
        status_code: int | None = None,
        title: str | None = None,
        problem_type: str | None = None,
        detail: str | None = None,
        instance: str | None = None,
    ) -> ProblemDetails:
        status_code = int(status_code) if status_code is not None else status.HTTP_500_INTERNAL_SERVER_ERROR
        problem = ProblemDetails(
            type=problem_type or self.options.create_problem_link_uri(status_code),
            title=title or reason_phrase(status_code),
            status=status_code,
        )
        if detail is not None:
            problem["detail"] = str(detail)
        problem["instance"] = instance if instance is not None else self._instance(request)
        problem[self.options.trace_id_property_name] = self._trace_id(request)
        return problem

    def create_validation_problem_details(
        self,
        request: Any,
        errors: Any,
        status_code: int | None = None,
    ) -> ValidationProblemDetails:
        if status_code is None:
            status_code = self.options.validation_problem_status_code
        status_code = int(status_code)
        problem = ValidationProblemDetails(
            type=self.options.create_problem_link_uri(status_code),
            title=VALIDATION_TITLE,
            status=status_code,
            instance=self._instance(request),
            errors=normalize_errors(errors),
        )
        problem[self.options.trace_id_property_name] = self._trace_id(request)
        return problem

    # ── Exceptions ───────────────────────────────────────────────────

    def create_exception_problem_details(
        self,
        request: Any,
        exc: BaseException,
        status_code: int | None = None,
    ) -> ProblemDetails | None:
        """
        Convert ``exc`` into problem details.

        ``status_code`` is the status already assigned by the caller
        (the response status for returned exceptions, ``None`` for raised
        ones).  It is used when a rule matched without producing a code, and
        as the last fallback when no rule matched at all.
        """
        fallback = int(status_code) if status_code is not None else status.HTTP_500_INTERNAL_SERVER_ERROR
        bind_status_code(request, fallback)

        result = self.options.try_map_status_code(request, exc)
        if result.matched:
            resolved = result.status_code if result.status_code is not None else fallback
        else:
            resolved = self._default_status_code(exc, fallback)

        if isinstance(exc, exceptions.ValidationError):
            problem = self.create_validation_problem_details(request, exc.detail, resolved)
        else:
            problem = self.create_problem_details(request, resolved, detail=self._detail(exc))

        include_details = self.options.include_exception_details(request, exc)
        if include_details:
            problem.setdefault("detail", str(exc) or type(exc).__name__)
            problem[self.options.exception_details_property_name] = self._exception_details(exc)

        self._log(request, exc, problem)
        return problem

    def _default_status_code(self, exc: BaseException, fallback: int) -> int:
        if isinstance(exc, exceptions.APIException):
            return exc.status_code
        for exc_class, status_code in _BUILTIN_STATUS_MAP.items():
            if isinstance(exc, exc_class):
                return status_code
        return fallback

    def _detail(self, exc: BaseException) -> str | None:
        # APIException messages are written for clients; anything else may leak internals.
        if isinstance(exc, exceptions.APIException):
            return str(exc.detail)
        return None

    def _exception_details(self, exc: BaseException) -> list[dict[str, Any]]:
        details = []
        seen: set[int] = set()
        current: BaseException | None = exc
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            details.append({
                "type": type(current).__name__,
                "message": str(current),
                "traceback": traceback.format_exception(type(current), current, current.__traceback__),
            })
            if current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None
        return details

    def _log(self, request: Any, exc: BaseException, problem: ProblemDetails) -> None:
        path = getattr(request, "path", "unknown")
        if self.options.log_unhandled_exception(request, exc, problem):
            logger.error(
                "Unhandled exception [%s] in %s, responding %s.",
                type(exc).__name__,
                path,
                problem.status,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        else:
            logger.warning(
                "Handled exception [%s] in %s, responding %s: %s",
                type(exc).__name__,
                path,
                problem.status,
                exc,
            )

    # ── Request helpers ──────────────────────────────────────────────

    def _instance(self, request: Any) -> str | None:
        if request is None:
            return None
        return getattr(request, "path", None)

    def _trace_id(self, request: Any) -> str:
        meta = getattr(request, "META", None) or {}
        header = get_settings().TRACE_ID_HEADER
        return meta.get(header) or uuid.uuid4().hex
