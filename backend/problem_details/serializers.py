"""
problem_details serializers.

**Response-only** serializers describing the problem details payloads in
the OpenAPI schema.  They are never used to validate input; reference
them from ``extend_schema``::

    @extend_schema(
        responses={
            200: OrderSerializer,
            404: OpenApiResponse(response=ProblemDetailsSerializer, description="Order not found."),
            400: OpenApiResponse(response=ValidationProblemDetailsSerializer, description="Invalid input."),
        },
    )
"""

from __future__ import annotations

from rest_framework import serializers


class ProblemDetailsSerializer(serializers.Serializer):
    """
    RFC 7807 problem details.

    Example::

        {
            "type": "https://httpstatuscodes.io/404",
            "title": "Not Found",
            "status": 404,
            "detail": "Order 42 does not exist.",
            "instance": "/api/demo/orders/42/",
            "traceId": "4f1c8d0e9a7b4c2d8e6f1a3b5c7d9e0f"
        }
    """

    type = serializers.URLField(
        help_text="URI reference identifying the problem type.",
    )
    title = serializers.CharField(
        help_text="Short, human-readable summary of the problem type.",
    )
    status = serializers.IntegerField(
        help_text="HTTP status code generated by the origin server.",
    )
    detail = serializers.CharField(
        required=False,
        help_text="Human-readable explanation specific to this occurrence.",
    )
    instance = serializers.CharField(
        required=False,
        allow_null=True,
        help_text="Request path where the problem occurred.",
    )
    traceId = serializers.CharField(
        required=False,
        help_text="Correlation id of the request (X-Request-ID header or generated).",
    )


class ValidationProblemDetailsSerializer(ProblemDetailsSerializer):
    """Problem details for invalid input, with per-field messages."""

    errors = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField()),
        help_text="Map of field name to its validation messages.",
    )
