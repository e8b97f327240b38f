"""
demo.exceptions - Order-domain exceptions raised by the demo views.

They are plain Python exceptions with no HTTP knowledge; the mapping to
status codes lives in ``demo.problems``.

┌─────────────────────┬──────────────────────────────────────┬──────┐
│ Exception           │ Rule                                 │ Code │
├─────────────────────┼──────────────────────────────────────┼──────┤
│ OrderNotFound       │ map_status_code                      │ 404  │
│ OrderLocked         │ map_status_code                      │ 409  │
│ PaymentDeclined     │ map, code == "insufficient_funds"    │ 402  │
│ PaymentDeclined     │ map, any other code                  │ 422  │
│ FulfilmentDeferred  │ map, mapping returns None            │ (*)  │
│ OrderError          │ map_status_code (base class, last)   │ 400  │
│ TimeoutError        │ ignore                               │  -   │
└─────────────────────┴──────────────────────────────────────┴──────┘

(*) keeps the status already on the response.
"""

from __future__ import annotations


class OrderError(Exception):
    """Base class for all order errors."""

    def __init__(self, message: str = "The order could not be processed.") -> None:
        self.message = message
        super().__init__(self.message)


class OrderNotFound(OrderError):

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} does not exist.")


class OrderLocked(OrderError):
    """The order is being edited by another process."""

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} is locked.")


class PaymentDeclined(OrderError):
    """
    The payment provider refused the charge.

    ``code`` is the provider's decline code, e.g. ``"insufficient_funds"``
    or ``"card_expired"``.
    """

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Payment declined: {code}.")


class FulfilmentDeferred(OrderError):

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Fulfilment of order {order_id} was deferred.")
