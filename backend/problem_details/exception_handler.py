"""
problem_details.exception_handler - DRF-compatible global exception handler.

Converts every exception raised inside a DRF view into an RFC 7807
response so that views don't need per-endpoint try/except boilerplate.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'problem_details.exception_handler.problem_details_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler
from rest_framework.views import set_rollback

from .responses import bind_status_code
from .settings import get_factory, get_options, get_settings

logger = logging.getLogger(__name__)


def _drf_headers(exc: Exception) -> dict[str, str]:
    headers = {}
    if isinstance(exc, exceptions.APIException):
        if getattr(exc, "auth_header", None):
            headers["WWW-Authenticate"] = exc.auth_header
        if getattr(exc, "wait", None):
            headers["Retry-After"] = "%d" % exc.wait
    return headers


def problem_details_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler producing problem details.

    Returns ``None`` (DRF re-raises the exception) when a rethrow rule
    matches.  When the factory suppresses conversion, DRF's default
    handler gets the exception instead.
    """
    request = context.get("request")
    bind_status_code(request, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if get_options().should_rethrow(request, exc):
        logger.debug(
            "Rethrowing [%s] from %s",
            type(exc).__name__,
            context.get("view", "unknown"),
        )
        return None

    problem = get_factory().create_exception_problem_details(request, exc)

    # Developers may choose to suppress conversion by returning None.
    if problem is None:
        return drf_default_handler(exc, context)

    set_rollback()
    return Response(
        problem,
        status=problem.status,
        headers=_drf_headers(exc),
        content_type=get_settings().CONTENT_TYPE,
    )
