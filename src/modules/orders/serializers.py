"""Order DRF serializers (read side).

Orders are created by checkout, never through this API, so only output
serializers live here.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item snapshot as it was at purchase time."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "image",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["id", "old_status", "new_status", "changed_by", "notes", "created_at"]
        read_only_fields = fields


class DeliveryDetailsSerializer(serializers.Serializer):
    full_name = serializers.CharField()
    phone = serializers.CharField()
    address = serializers.CharField()
    city = serializers.CharField()
    postal_code = serializers.CharField()
    notes = serializers.CharField(source="delivery_notes")


class OrderSerializer(serializers.ModelSerializer):
    """Buyer tracking view of an order."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    delivery = DeliveryDetailsSerializer(source="*", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "buyer_id",
            "status",
            "total_amount",
            "delivery",
            "payment_method",
            "payment_details",
            "items",
            "status_history",
            "shipped_at",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
