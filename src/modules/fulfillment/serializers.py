from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import OrderItem


class ReceivedItemSerializer(serializers.ModelSerializer):
    """One line of a buyer's order, as the seller sees it."""

    order_id = serializers.UUIDField(source="order.id", read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    buyer_id = serializers.CharField(source="order.buyer_id", read_only=True)
    buyer_name = serializers.CharField(source="order.full_name", read_only=True)
    buyer_phone = serializers.CharField(source="order.phone", read_only=True)
    buyer_address = serializers.SerializerMethodField()
    delivery_notes = serializers.CharField(source="order.delivery_notes", read_only=True)
    line_total = serializers.DecimalField(
        source="subtotal", max_digits=12, decimal_places=2, read_only=True
    )
    payment_method = serializers.CharField(source="order.payment_method", read_only=True)
    status = serializers.CharField(source="order.status", read_only=True)
    ordered_at = serializers.DateTimeField(source="order.created_at", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "order_number",
            "buyer_id",
            "buyer_name",
            "buyer_phone",
            "buyer_address",
            "delivery_notes",
            "product_id",
            "product_name",
            "image",
            "quantity",
            "unit_price",
            "line_total",
            "payment_method",
            "status",
            "ordered_at",
        ]
        read_only_fields = fields

    def get_buyer_address(self, obj: OrderItem) -> str:
        order = obj.order
        return ", ".join(p for p in (order.address, order.city, order.postal_code) if p)


class SellerSummarySerializer(serializers.Serializer):
    sales_today = serializers.DecimalField(max_digits=14, decimal_places=2)
    earnings_this_month = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_to_ship = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    completed_orders = serializers.IntegerField()
