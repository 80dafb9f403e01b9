"""Serializers for transforming catalog domain models to API responses."""

from rest_framework import serializers


class AvailabilitySerializer(serializers.Serializer):
    """Serializer for the Availability result."""

    available = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    current_price = serializers.SerializerMethodField()
    title = serializers.CharField(allow_null=True)

    def get_current_price(self, obj) -> int | None:
        return obj.current_price.amount if obj.current_price is not None else None
