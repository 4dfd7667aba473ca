"""Per-seller rollups maintained incrementally from order events.

``SellerSalesSummary`` counts received order lines by status bucket;
``SellerDailySales`` buckets sales by the local calendar day the order
was placed.  Both can be recomputed from order lines with
``FulfillmentService.rebuild_summary``.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.core.models import BaseModel


class SellerSalesSummary(BaseModel):
    seller_id = models.CharField(max_length=128, unique=True)
    orders_received = models.PositiveIntegerField(default=0)
    pending_to_ship = models.PositiveIntegerField(default=0)
    shipped = models.PositiveIntegerField(default=0)
    completed = models.PositiveIntegerField(default=0)
    gross_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        db_table = "seller_sales_summaries"

    def __str__(self) -> str:
        return f"{self.seller_id}: {self.orders_received} lines"


class SellerDailySales(BaseModel):
    seller_id = models.CharField(max_length=128)
    day = models.DateField()
    sales_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    items_sold = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "seller_daily_sales"
        ordering = ["-day"]
        constraints = [
            models.UniqueConstraint(
                fields=["seller_id", "day"], name="seller_daily_sales_unique_day"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.seller_id} {self.day}: {self.sales_total}"
