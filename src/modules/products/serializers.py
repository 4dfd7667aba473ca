"""Product DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; these
serializers only render the catalog.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.core.identity import get_identity
from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Catalog representation; ``is_own`` is relative to the caller."""

    is_own = serializers.SerializerMethodField()
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "in_stock",
            "image",
            "owner_id",
            "is_own",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_own(self, obj: Product) -> bool:
        request = self.context.get("request")
        user_id = get_identity(getattr(request, "user", None))
        return obj.is_owned_by(user_id)
