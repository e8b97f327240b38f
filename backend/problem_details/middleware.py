"""
problem_details.middleware - Converts error results into problem details.

``ProblemDetailsMiddleware`` covers what the DRF exception handler cannot
see:

1. **Returned results** (``process_template_response``): a DRF
   ``Response`` whose ``data`` is a string, an exception, or serializer
   errors and whose status is 4xx/5xx.
2. **Plain Django views** (``process_exception``): exceptions raised
   outside DRF's dispatch.
3. **Empty error responses** (``process_response``): ``Response(status=404)``
   or ``HttpResponse(status=403)`` without a body.

Register in ``settings.py``::

    MIDDLEWARE = [
        ...
        'problem_details.middleware.ProblemDetailsMiddleware',
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponseBase, JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.response import Response
from rest_framework.utils.serializer_helpers import ReturnDict, ReturnList

from .problem import ProblemDetails
from .responses import bind_status_code, has_problem, is_problem_status_code
from .settings import get_factory, get_options, get_settings

logger = logging.getLogger(__name__)


class ProblemDetailsMiddleware(MiddlewareMixin):

    # ── Returned results ─────────────────────────────────────────────

    def process_template_response(self, request: HttpRequest, response):
        # Only handle DRF responses.
        if not isinstance(response, Response):
            return response

        data = response.data

        if isinstance(data, ProblemDetails):
            return response

        # Serializer errors returned as ``Response(serializer.errors, status=400)``.
        if isinstance(data, (ReturnDict, ReturnList)) and is_problem_status_code(response.status_code):
            problem = get_factory().create_validation_problem_details(request, data, response.status_code)
            return self._replace(response, problem)

        # Make sure the result should be treated as a problem.
        if not is_problem_status_code(response.status_code):
            return response

        # A string result becomes the "detail" member.
        if isinstance(data, str):
            problem = get_factory().create_problem_details(request, response.status_code, detail=data)
            return self._replace(response, problem)

        # The result is an exception: treat it as if it had been raised.
        if isinstance(data, Exception):
            status_code = response.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
            bind_status_code(request, status_code)
            if get_options().should_rethrow(request, data):
                raise data

            problem = get_factory().create_exception_problem_details(request, data, status_code)

            # Developers may choose to ignore errors by returning None.
            if problem is None:
                return response

            return self._replace(response, problem)

        return response

    def _replace(self, response: Response, problem: ProblemDetails) -> Response:
        response.data = problem
        response.status_code = problem.status
        response.content_type = get_settings().CONTENT_TYPE
        return response

    # ── Plain Django views ───────────────────────────────────────────

    def process_exception(self, request: HttpRequest, exception: Exception) -> HttpResponseBase | None:
        bind_status_code(request, status.HTTP_500_INTERNAL_SERVER_ERROR)
        if get_options().should_rethrow(request, exception):
            return None

        problem = get_factory().create_exception_problem_details(request, exception)
        if problem is None:
            return None

        return self._problem_response(problem)

    # ── Empty error responses ────────────────────────────────────────

    def process_response(self, request: HttpRequest, response: HttpResponseBase) -> HttpResponseBase:
        if not has_problem(response):
            return response

        logger.debug("Writing problem details for empty %s response to %s", response.status_code, request.path)
        problem = get_factory().create_problem_details(request, response.status_code)
        new_response = self._problem_response(problem)
        for header in ("WWW-Authenticate", "Retry-After", "Allow"):
            if header in response:
                new_response[header] = response[header]
        return new_response

    def _problem_response(self, problem: ProblemDetails) -> JsonResponse:
        return JsonResponse(problem, status=problem.status, content_type=get_settings().CONTENT_TYPE)
