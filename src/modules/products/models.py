"""Product model: a seller's listing with price and a shared stock counter.

Business rules implemented:
- Price is never negative (check constraint).
- Stock never goes negative: decrements go through a conditional update
  (see ``ProductDjangoRepository.decrement_stock``) and the column is
  unsigned with a check constraint as a backstop.
- An owner cannot buy their own product (enforced by the cart service).
- Owners withdraw products by soft delete, so cart entries and order lines
  that reference them stay intact.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel


class Product(SoftDeleteModel):
    """Product aggregate root.

    ``owner_id`` is the opaque identity of the seller who listed the
    product.  ``image`` is a reference (URL or storage key) into the
    external file store.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    stock = models.PositiveIntegerField(default=0)
    image = models.CharField(max_length=500, blank=True, default="")
    owner_id = models.CharField(max_length=128, db_index=True)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
            models.CheckConstraint(
                check=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def is_owned_by(self, user_id: str | None) -> bool:
        return bool(user_id) and self.owner_id == user_id

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def __str__(self) -> str:
        return f"{self.name} ({self.stock} in stock)"
