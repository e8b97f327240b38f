"""
Unit tests for ``ProblemDetailsMiddleware`` hooks, called directly.
"""

from __future__ import annotations

import pytest
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response

from problem_details.factory import ProblemDetailsFactory
from problem_details.middleware import ProblemDetailsMiddleware
from problem_details.problem import ProblemDetails


class SuppressingFactory(ProblemDetailsFactory):
    def create_exception_problem_details(self, request, exc, status_code=None):
        return None


@pytest.fixture()
def middleware():
    return ProblemDetailsMiddleware(lambda request: HttpResponse())


def test_non_drf_responses_are_ignored(middleware, api_request):
    """Plain Django responses pass through the result hook."""
    response = HttpResponse("plain", status=status.HTTP_409_CONFLICT)

    assert middleware.process_template_response(api_request(), response) is response


def test_existing_problem_details_are_not_converted_twice(middleware, api_request):
    """A response already carrying problem details is kept."""
    problem = ProblemDetails(status=418, title="I'm a Teapot")
    response = Response(problem, status=418)

    result = middleware.process_template_response(api_request(), response)

    assert result.data is problem


def test_success_string_is_untouched(middleware, api_request):
    """String results on success codes are not converted."""
    response = Response("ok", status=status.HTTP_200_OK)

    assert middleware.process_template_response(api_request(), response).data == "ok"


def test_other_error_payloads_are_untouched(middleware, api_request):
    """Arbitrary dict payloads on error codes are left alone."""
    response = Response({"error": "custom"}, status=status.HTTP_400_BAD_REQUEST)

    assert middleware.process_template_response(api_request(), response).data == {"error": "custom"}


def test_string_result_is_replaced(middleware, api_request):
    """A string error result becomes the problem detail."""
    response = Response("Out of stock.", status=status.HTTP_409_CONFLICT)

    result = middleware.process_template_response(api_request(), response)

    assert isinstance(result.data, ProblemDetails)
    assert result.data["detail"] == "Out of stock."
    assert result.content_type == "application/problem+json"


def test_exception_result_status_feeds_fallback(middleware, api_request, problem_settings):
    """An unmatched returned exception keeps the response status."""
    problem_settings(CONFIGURE=None)
    response = Response(ValueError("nope"), status=status.HTTP_502_BAD_GATEWAY)

    result = middleware.process_template_response(api_request(), response)

    assert result.status_code == status.HTTP_502_BAD_GATEWAY
    assert result.data.status == status.HTTP_502_BAD_GATEWAY


def test_suppressed_exception_result_is_left_alone(middleware, api_request, problem_settings):
    """A factory returning None leaves the response as it was."""
    problem_settings(FACTORY_CLASS=SuppressingFactory)
    exc = ValueError("kept")
    response = Response(exc, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    result = middleware.process_template_response(api_request(), response)

    assert result is response
    assert result.data is exc
    assert result.content_type is None


def test_empty_error_response_keeps_auth_header(middleware, api_request):
    """WWW-Authenticate survives the rewrite of an empty 401."""
    response = HttpResponse(status=status.HTTP_401_UNAUTHORIZED)
    response["WWW-Authenticate"] = 'Bearer realm="api"'

    result = middleware.process_response(api_request(), response)

    assert result.status_code == status.HTTP_401_UNAUTHORIZED
    assert result["WWW-Authenticate"] == 'Bearer realm="api"'
    assert result["Content-Type"] == "application/problem+json"


def test_process_exception_respects_rethrow(middleware, api_request, problem_settings):
    """Ignored exceptions are handed back to Django."""
    problem_settings(CONFIGURE=lambda options: options.ignore(KeyError))

    assert middleware.process_exception(api_request(), KeyError("x")) is None
    assert middleware.process_exception(api_request(), ValueError("x")).status_code == 500


def test_exception_result_rules_see_response_status(middleware, api_request, problem_settings):
    """Rules can read the status of the returned response."""
    def configure(options):
        options.map(
            ValueError,
            lambda request, exc: request.problem_status_code == status.HTTP_502_BAD_GATEWAY,
            lambda request, exc: status.HTTP_504_GATEWAY_TIMEOUT,
        )

    problem_settings(CONFIGURE=configure)
    response = Response(ValueError("upstream"), status=status.HTTP_502_BAD_GATEWAY)

    result = middleware.process_template_response(api_request(), response)

    assert result.status_code == status.HTTP_504_GATEWAY_TIMEOUT


def test_process_exception_rethrow_rules_see_500(middleware, api_request, problem_settings):
    """Raised exceptions are classified with status 500 bound."""
    problem_settings(
        CONFIGURE=lambda options: options.rethrow(
            KeyError, lambda request, exc: request.problem_status_code == 500
        )
    )

    assert middleware.process_exception(api_request(), KeyError("x")) is None
