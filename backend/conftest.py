"""
Root conftest.py - shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``api_request`` factory fixture building bare requests.
  - ``options`` fixture returning fresh, unsealed ``ProblemDetailsOptions``.
  - ``problem_settings`` fixture for swapping ``PROBLEM_DETAILS`` per test.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient, APIRequestFactory


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def api_request():
    """
    Factory fixture that builds a Django request for unit tests.

    Usage::

        def test_something(api_request):
            request = api_request("/api/demo/orders/7/", HTTP_X_REQUEST_ID="abc")
    """
    factory = APIRequestFactory()

    def _make(path: str = "/api/demo/orders/", **extra):
        return factory.get(path, **extra)

    return _make


@pytest.fixture()
def options():
    """Fresh unsealed options with no rules registered."""
    from problem_details import ProblemDetailsOptions

    return ProblemDetailsOptions()


@pytest.fixture()
def problem_settings(settings):
    """
    Returns a helper replacing ``settings.PROBLEM_DETAILS``.

    The cached options and factory are rebuilt on every change and once
    more when the test ends.

    Usage::

        def test_custom(problem_settings):
            problem_settings(CONFIGURE=lambda options: options.rethrow_all())
    """

    def _apply(**values) -> None:
        settings.PROBLEM_DETAILS = {"CONFIGURE": "demo.problems.configure", **values}

    return _apply
