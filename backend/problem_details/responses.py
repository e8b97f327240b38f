"""
problem_details.responses - Status code and response helpers.
"""

from __future__ import annotations

from django.http import HttpResponseBase


def is_problem_status_code(status_code: int | None) -> bool:
    """True for client (4xx) and server (5xx) error codes."""
    if status_code is None:
        return False
    return 400 <= int(status_code) < 600


def has_problem(response: HttpResponseBase) -> bool:
    """
    Return True when ``response`` is an error response without a body.

    Such responses (``Response(status=404)``, ``HttpResponse(status=403)``)
    are rewritten into problem details by the middleware.  Responses that
    already carry content are left alone.
    """
    if response is None:
        raise ValueError("response is required.")

    if not is_problem_status_code(response.status_code):
        return False

    if getattr(response, "streaming", False):
        return False

    # Template responses are rendered before process_response runs.
    if not getattr(response, "is_rendered", True):
        return False

    return len(response.content) == 0


STATUS_CODE_ATTRIBUTE = "problem_status_code"


def bind_status_code(request, status_code: int | None) -> None:
    """
    Expose the status the response currently carries as
    ``request.problem_status_code`` so rule predicates and mappings can
    read it.  Raised exceptions are bound to 500.
    """
    if request is not None:
        setattr(request, STATUS_CODE_ATTRIBUTE, status_code)
