"""Django ORM implementation of the Fulfillment repository.

Counter updates use ``F()`` expressions so concurrent orders for the
same seller never lose an increment.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import F, QuerySet, Sum
from django.utils import timezone

from modules.fulfillment.constants import STATUS_BUCKETS
from modules.fulfillment.dtos import SellerLines
from modules.fulfillment.models import SellerDailySales, SellerSalesSummary
from modules.fulfillment.repositories.interfaces import IFulfillmentRepository
from modules.orders.models import Order, OrderItem

logger = structlog.get_logger(__name__)


class FulfillmentDjangoRepository(IFulfillmentRepository):
    def received_items(self, seller_id: str) -> QuerySet[OrderItem]:
        return (
            OrderItem.objects.select_related("order")
            .filter(product__owner_id=seller_id)
            .order_by("-order__created_at", "created_at")
        )

    def lines_by_seller(self, order_id: UUID) -> Tuple[Optional[date], Dict[str, SellerLines]]:
        order = Order.objects.filter(id=order_id).first()
        if order is None:
            return None, {}
        shares: Dict[str, SellerLines] = defaultdict(SellerLines)
        items = OrderItem.objects.filter(order_id=order_id).values_list(
            "product__owner_id", "quantity", "subtotal"
        )
        for owner_id, quantity, subtotal in items:
            shares[owner_id].add(quantity, subtotal)
        return timezone.localdate(order.created_at), dict(shares)

    def add_placed(self, seller_id: str, day: date, share: SellerLines) -> None:
        SellerSalesSummary.objects.get_or_create(seller_id=seller_id)
        SellerSalesSummary.objects.filter(seller_id=seller_id).update(
            orders_received=F("orders_received") + share.lines,
            pending_to_ship=F("pending_to_ship") + share.lines,
            gross_sales=F("gross_sales") + share.amount,
            updated_at=timezone.now(),
        )
        SellerDailySales.objects.get_or_create(seller_id=seller_id, day=day)
        SellerDailySales.objects.filter(seller_id=seller_id, day=day).update(
            sales_total=F("sales_total") + share.amount,
            items_sold=F("items_sold") + share.quantity,
            updated_at=timezone.now(),
        )

    def move_lines(self, seller_id: str, from_field: str, to_field: str, lines: int) -> None:
        SellerSalesSummary.objects.get_or_create(seller_id=seller_id)
        SellerSalesSummary.objects.filter(seller_id=seller_id).update(
            **{
                from_field: F(from_field) - lines,
                to_field: F(to_field) + lines,
                "updated_at": timezone.now(),
            }
        )

    def get_summary(self, seller_id: str) -> Optional[SellerSalesSummary]:
        return SellerSalesSummary.objects.filter(seller_id=seller_id).first()

    def sales_since(self, seller_id: str, start: date) -> Decimal:
        total = SellerDailySales.objects.filter(seller_id=seller_id, day__gte=start).aggregate(
            total=Sum("sales_total")
        )["total"]
        return total or Decimal("0.00")

    @transaction.atomic
    def replace_rollups(self, seller_id: str) -> SellerSalesSummary:
        counters = {"pending_to_ship": 0, "shipped": 0, "completed": 0}
        gross = Decimal("0.00")
        received = 0
        daily: Dict[date, SellerLines] = defaultdict(SellerLines)

        items = OrderItem.objects.filter(product__owner_id=seller_id).values_list(
            "order__status", "order__created_at", "quantity", "subtotal"
        )
        for status, created_at, quantity, subtotal in items:
            received += 1
            gross += subtotal
            counters[STATUS_BUCKETS[status]] += 1
            daily[timezone.localdate(created_at)].add(quantity, subtotal)

        summary, _ = SellerSalesSummary.objects.update_or_create(
            seller_id=seller_id,
            defaults={"orders_received": received, "gross_sales": gross, **counters},
        )
        SellerDailySales.objects.filter(seller_id=seller_id).delete()
        SellerDailySales.objects.bulk_create(
            [
                SellerDailySales(
                    seller_id=seller_id,
                    day=day,
                    sales_total=share.amount,
                    items_sold=share.quantity,
                )
                for day, share in daily.items()
            ]
        )
        logger.info("fulfillment.rollups_rebuilt", seller_id=seller_id, lines=received)
        return summary

    def seller_ids(self) -> List[str]:
        return list(
            OrderItem.objects.values_list("product__owner_id", flat=True)
            .distinct()
            .order_by("product__owner_id")
        )
