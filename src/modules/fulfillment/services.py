"""Seller fulfillment: what sellers received and how they are doing.

Rollups are maintained per event in O(lines of the changed order)
instead of rescanning every buyer's orders on each read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.identity import require_identity
from modules.fulfillment.constants import STATUS_BUCKETS
from modules.fulfillment.dtos import SellerSummaryDTO

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.fulfillment.models import SellerSalesSummary
    from modules.fulfillment.repositories.interfaces import IFulfillmentRepository
    from modules.orders.models import OrderItem

logger = structlog.get_logger(__name__)


class FulfillmentService:
    def __init__(self, repository: IFulfillmentRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def list_received(self, seller_id: Optional[str]) -> QuerySet[OrderItem]:
        """Every order line for the seller's products, newest order first.

        A seller without products or sales gets an empty result.
        """
        return self._repo.received_items(require_identity(seller_id))

    def get_summary(self, seller_id: Optional[str]) -> SellerSummaryDTO:
        seller_id = require_identity(seller_id)
        summary = self._repo.get_summary(seller_id)
        if summary is None:
            return SellerSummaryDTO()

        today = timezone.localdate()
        return SellerSummaryDTO(
            sales_today=self._repo.sales_since(seller_id, today),
            earnings_this_month=self._repo.sales_since(seller_id, today.replace(day=1)),
            pending_to_ship=summary.pending_to_ship,
            total_orders=summary.orders_received,
            completed_orders=summary.completed,
        )

    # ------------------------------------------------------------------
    # Projections (driven by order events)
    # ------------------------------------------------------------------

    def record_order_placed(self, order_id: UUID) -> None:
        day, shares = self._repo.lines_by_seller(order_id)
        for seller_id, share in shares.items():
            self._repo.add_placed(seller_id, day, share)
        logger.info(
            "fulfillment.order_recorded",
            order_id=str(order_id),
            seller_count=len(shares),
        )

    def record_status_change(self, order_id: UUID, old_status: str, new_status: str) -> None:
        from_field = STATUS_BUCKETS.get(old_status)
        to_field = STATUS_BUCKETS.get(new_status)
        if from_field is None or to_field is None or from_field == to_field:
            return
        _, shares = self._repo.lines_by_seller(order_id)
        for seller_id, share in shares.items():
            self._repo.move_lines(seller_id, from_field, to_field, share.lines)

    # ------------------------------------------------------------------
    # Repair
    # ------------------------------------------------------------------

    @transaction.atomic
    def rebuild_summary(self, seller_id: str) -> SellerSalesSummary:
        """Recompute one seller's rollups from the order lines."""
        return self._repo.replace_rollups(seller_id)

    def rebuild_all(self) -> int:
        seller_ids = self._repo.seller_ids()
        for seller_id in seller_ids:
            self.rebuild_summary(seller_id)
        return len(seller_ids)
