"""
Demo app views.

Each view produces one of the error shapes the ``problem_details``
add-on converts:

* raised domain exceptions (DRF exception handler),
* returned strings, exceptions and serializer errors (middleware result
  filter),
* empty error responses (middleware ``process_response``),
* exceptions from a plain Django view (middleware ``process_exception``).
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from rest_framework import exceptions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from problem_details.serializers import (
    ProblemDetailsSerializer,
    ValidationProblemDetailsSerializer,
)

from .exceptions import FulfilmentDeferred, OrderLocked, OrderNotFound, PaymentDeclined
from .serializers import OrderSerializer, PaymentSerializer

SHIPPED_ORDER_ID = 2
LOCKED_ORDER_ID = 3

_ORDERS = {
    1: {"id": 1, "sku": "BOOK42", "quantity": 1},
    SHIPPED_ORDER_ID: {"id": SHIPPED_ORDER_ID, "sku": "LAMP7", "quantity": 2},
    LOCKED_ORDER_ID: {"id": LOCKED_ORDER_ID, "sku": "DESK1", "quantity": 1},
}


def _get_order(order_id: int) -> dict:
    try:
        return _ORDERS[order_id]
    except KeyError:
        raise OrderNotFound(order_id) from None


class OrderListView(APIView):
    """
    **POST /api/demo/orders/**

    Validate an order.  Invalid input raises ``ValidationError`` and is
    answered with validation problem details.
    """

    @extend_schema(
        summary="Create order",
        request=OrderSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(response=ValidationProblemDetailsSerializer, description="Invalid order."),
        },
        tags=["Orders"],
    )
    def post(self, request: Request) -> Response:
        serializer = OrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({"id": len(_ORDERS) + 1, **serializer.validated_data}, status=status.HTTP_201_CREATED)


class OrderDraftView(APIView):
    """
    **POST /api/demo/orders/drafts/**

    Same validation as ``OrderListView`` but returns ``serializer.errors``
    instead of raising.
    """

    @extend_schema(
        summary="Validate draft order",
        request=OrderSerializer,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(response=ValidationProblemDetailsSerializer, description="Invalid draft."),
        },
        tags=["Orders"],
    )
    def post(self, request: Request) -> Response:
        serializer = OrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class OrderDetailView(APIView):
    """
    **GET /api/demo/orders/{id}/**

    Raises ``OrderNotFound`` for unknown ids and returns ``OrderLocked``
    as a result for the locked order.
    """

    @extend_schema(
        summary="Retrieve order",
        responses={
            200: OrderSerializer,
            404: OpenApiResponse(response=ProblemDetailsSerializer, description="Order not found."),
            409: OpenApiResponse(response=ProblemDetailsSerializer, description="Order locked."),
        },
        tags=["Orders"],
    )
    def get(self, request: Request, order_id: int) -> Response:
        order = _get_order(order_id)
        if order_id == LOCKED_ORDER_ID:
            return Response(OrderLocked(order_id), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderCancelView(APIView):
    """
    **POST /api/demo/orders/{id}/cancel/**

    Returns a plain string with ``409`` when the order already shipped.
    """

    @extend_schema(
        summary="Cancel order",
        request=None,
        responses={
            204: None,
            409: OpenApiResponse(response=ProblemDetailsSerializer, description="Order already shipped."),
        },
        tags=["Orders"],
    )
    def post(self, request: Request, order_id: int) -> Response:
        _get_order(order_id)
        if order_id == SHIPPED_ORDER_ID:
            return Response(f"Order {order_id} has already shipped.", status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderPaymentView(APIView):
    """
    **POST /api/demo/orders/{id}/pay/**

    A non-empty ``decline_code`` raises ``PaymentDeclined``.
    """

    @extend_schema(
        summary="Pay order",
        request=PaymentSerializer,
        responses={
            204: None,
            402: OpenApiResponse(response=ProblemDetailsSerializer, description="Insufficient funds."),
            422: OpenApiResponse(response=ProblemDetailsSerializer, description="Payment declined."),
        },
        tags=["Orders"],
    )
    def post(self, request: Request, order_id: int) -> Response:
        _get_order(order_id)
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        decline_code = serializer.validated_data["decline_code"]
        if decline_code:
            raise PaymentDeclined(decline_code)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderFulfilmentView(APIView):
    """
    **POST /api/demo/orders/{id}/fulfil/**

    Returns ``FulfilmentDeferred`` with ``503``; its rule maps to no code,
    so the response status is kept.
    """

    @extend_schema(
        summary="Fulfil order",
        request=None,
        responses={503: OpenApiResponse(response=ProblemDetailsSerializer, description="Deferred.")},
        tags=["Orders"],
    )
    def post(self, request: Request, order_id: int) -> Response:
        _get_order(order_id)
        return Response(FulfilmentDeferred(order_id), status=status.HTTP_503_SERVICE_UNAVAILABLE)


class InventoryView(APIView):
    """
    **GET /api/demo/inventory/**

    The inventory backend always times out.  ``TimeoutError`` is ignored
    by the demo configuration, so it propagates unconverted.
    """

    @extend_schema(summary="Inventory", responses={200: None}, tags=["Inventory"])
    def get(self, request: Request) -> Response:
        raise TimeoutError("Inventory service did not answer within 5s.")


class ReportView(APIView):
    """
    **GET /api/demo/reports/**

    ``?kind=crash`` raises an unclassified ``RuntimeError``;
    ``?kind=forbidden`` raises DRF's ``PermissionDenied``; anything else
    answers ``410`` without a body.
    """

    @extend_schema(
        summary="Reports",
        responses={
            403: OpenApiResponse(response=ProblemDetailsSerializer, description="Forbidden."),
            410: OpenApiResponse(response=ProblemDetailsSerializer, description="Reports were retired."),
            500: OpenApiResponse(response=ProblemDetailsSerializer, description="Unexpected error."),
        },
        tags=["Reports"],
    )
    def get(self, request: Request) -> Response:
        kind = request.query_params.get("kind")
        if kind == "crash":
            raise RuntimeError("Report renderer crashed.")
        if kind == "forbidden":
            raise exceptions.PermissionDenied("Reports are restricted to auditors.")
        return Response(status=status.HTTP_410_GONE)


def legacy_order_view(request: HttpRequest, order_id: int) -> JsonResponse:
    """Plain Django view kept for old clients: GET /api/demo/legacy/orders/{id}/."""
    return JsonResponse(_get_order(order_id))
