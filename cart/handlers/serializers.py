"""Serializers for cart requests and responses."""

from rest_framework import serializers

from catalog.domain import ItemType


class CartItemSerializer(serializers.Serializer):
    """Serializer for CartItem domain model."""

    item_type = serializers.CharField(source="item_type.value")
    item_id = serializers.CharField()
    title = serializers.CharField()
    unit_price = serializers.IntegerField(source="unit_price.amount")
    quantity = serializers.IntegerField()
    line_subtotal = serializers.IntegerField()


class CartSerializer(serializers.Serializer):
    """Serializer for Cart domain model."""

    items = CartItemSerializer(many=True)
    subtotal = serializers.IntegerField()
    tax = serializers.IntegerField()
    total = serializers.IntegerField()
    item_count = serializers.IntegerField()
    updated_at = serializers.DateTimeField()


class AddCartItemSerializer(serializers.Serializer):
    item_type = serializers.ChoiceField(choices=[t.value for t in ItemType])
    item_id = serializers.CharField()
    quantity = serializers.IntegerField(default=1)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
