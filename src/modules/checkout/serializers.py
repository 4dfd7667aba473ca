from __future__ import annotations

from rest_framework import serializers

from modules.checkout.models import CheckoutLine, CheckoutSession


class CheckoutLineSerializer(serializers.ModelSerializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CheckoutLine
        fields = [
            "cart_entry_id",
            "product_id",
            "name",
            "unit_price",
            "image",
            "quantity",
            "subtotal",
        ]
        read_only_fields = fields


class CheckoutSessionSerializer(serializers.ModelSerializer):
    lines = CheckoutLineSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    delivery = serializers.SerializerMethodField()
    order_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = CheckoutSession
        fields = [
            "id",
            "step",
            "lines",
            "total",
            "delivery",
            "payment_method",
            "payment_details",
            "order_id",
            "failure_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_delivery(self, obj: CheckoutSession) -> dict:
        return {
            "full_name": obj.full_name,
            "phone": obj.phone,
            "address": obj.address,
            "city": obj.city,
            "postal_code": obj.postal_code,
            "notes": obj.delivery_notes,
        }
