"""Serializers for order requests and responses."""

from rest_framework import serializers


class OrderItemSerializer(serializers.Serializer):
    """Serializer for OrderItem domain model."""

    id = serializers.CharField()
    item_type = serializers.CharField(source="item_type.value")
    item_id = serializers.CharField()
    title = serializers.CharField()
    unit_price = serializers.IntegerField(source="unit_price.amount")
    quantity = serializers.IntegerField()
    line_subtotal = serializers.IntegerField()


class OrderSerializer(serializers.Serializer):
    """Serializer for Order domain model."""

    id = serializers.CharField()
    user_id = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    subtotal = serializers.IntegerField()
    tax = serializers.IntegerField()
    total = serializers.IntegerField()
    payment_reference = serializers.CharField(allow_null=True)
    payment_method = serializers.CharField(allow_blank=True)
    items = OrderItemSerializer(many=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    completed_at = serializers.DateTimeField(allow_null=True)


class OrderPageSerializer(serializers.Serializer):
    orders = OrderSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    pages = serializers.IntegerField()


class OrderListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(default=1)
    limit = serializers.IntegerField(default=20)
    status = serializers.CharField(required=False)


class PaymentReferenceSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=255)
    payment_method = serializers.CharField(max_length=50, required=False, default="")


class OrderSearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.CharField(required=False)
    item_type = serializers.CharField(required=False)
    created_from = serializers.DateTimeField(required=False)
    created_to = serializers.DateTimeField(required=False)
    page = serializers.IntegerField(default=1)
    limit = serializers.IntegerField(default=20)


class DateRangeQuerySerializer(serializers.Serializer):
    created_from = serializers.DateTimeField(required=False)
    created_to = serializers.DateTimeField(required=False)


class TopItemSerializer(serializers.Serializer):
    item_type = serializers.CharField(source="item_type.value")
    item_id = serializers.CharField()
    title = serializers.CharField()
    total_quantity = serializers.IntegerField()
    total_revenue = serializers.IntegerField()


class OrderStatsSerializer(serializers.Serializer):
    total_revenue = serializers.IntegerField()
    order_count = serializers.IntegerField()
    average_order_value = serializers.IntegerField()
    orders_by_status = serializers.DictField(child=serializers.IntegerField())
    top_items = TopItemSerializer(many=True)


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.CharField()
    event_id = serializers.CharField()
    order_id = serializers.CharField()
    status = serializers.CharField()
    attendees = serializers.IntegerField()
    event_title = serializers.CharField()
    event_starts_at = serializers.DateTimeField(allow_null=True)
    venue_name = serializers.CharField(allow_blank=True)
    created_at = serializers.DateTimeField()


class BookingListQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
