"""
demo.problems - Exception classification for the demo project.

Referenced from ``settings.PROBLEM_DETAILS["CONFIGURE"]``.  Specific
exception types are registered before ``OrderError`` because the first
matching rule wins.
"""

from __future__ import annotations

from rest_framework import status

from problem_details import ProblemDetailsOptions

from .exceptions import (
    FulfilmentDeferred,
    OrderError,
    OrderLocked,
    OrderNotFound,
    PaymentDeclined,
)


def configure(options: ProblemDetailsOptions) -> None:
    options.map_status_code(OrderNotFound, status.HTTP_404_NOT_FOUND)
    options.map_status_code(OrderLocked, status.HTTP_409_CONFLICT)

    options.map(
        PaymentDeclined,
        lambda request, exc: exc.code == "insufficient_funds",
        lambda request, exc: status.HTTP_402_PAYMENT_REQUIRED,
    )
    options.map(
        PaymentDeclined,
        lambda request, exc: True,
        lambda request, exc: status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    options.map(
        FulfilmentDeferred,
        lambda request, exc: True,
        lambda request, exc: None,
    )

    # catch-all base class last
    options.map_status_code(OrderError, status.HTTP_400_BAD_REQUEST)

    options.ignore(TimeoutError)
