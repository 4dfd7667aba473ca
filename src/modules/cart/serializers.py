from __future__ import annotations

from rest_framework import serializers

from modules.cart.models import CartEntry


class CartEntrySerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    subtotal = serializers.SerializerMethodField()

    class Meta:
        model = CartEntry
        fields = [
            "id",
            "product_id",
            "name",
            "price",
            "image",
            "quantity",
            "subtotal",
            "created_at",
        ]
        read_only_fields = fields

    def get_subtotal(self, obj: CartEntry) -> str:
        return str(obj.price * obj.quantity)
