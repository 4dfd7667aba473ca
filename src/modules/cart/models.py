"""Cart entries: one row per (user, product) the user intends to buy.

The name/price/image columns are a snapshot taken when the product was
added; checkout charges the snapshot price.  Quantity starts at 1 and is
adjusted client-side during selection, never written back here.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class CartEntry(BaseModel):
    user_id = models.CharField(max_length=128, db_index=True)
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="cart_entries",
    )
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image = models.CharField(max_length=500, blank=True, default="")
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "cart_entries"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "product"],
                name="cart_entry_unique_product_per_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity} ({self.user_id})"
