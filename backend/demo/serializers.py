"""
demo serializers.
"""

from __future__ import annotations

from rest_framework import serializers


class OrderSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    sku = serializers.CharField(max_length=32)
    quantity = serializers.IntegerField(min_value=1, max_value=100)

    def validate_sku(self, value: str) -> str:
        if not value.isalnum():
            raise serializers.ValidationError("SKU must be alphanumeric.")
        return value.upper()


class PaymentSerializer(serializers.Serializer):
    decline_code = serializers.CharField(required=False, allow_blank=True, default="")
