"""Fulfillment repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple
from uuid import UUID

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.fulfillment.dtos import SellerLines
    from modules.fulfillment.models import SellerSalesSummary
    from modules.orders.models import OrderItem


class IFulfillmentRepository(ABC):
    @abstractmethod
    def received_items(self, seller_id: str) -> QuerySet[OrderItem]:
        """Order lines for the seller's products, newest order first."""

    @abstractmethod
    def lines_by_seller(self, order_id: UUID) -> Tuple[Optional[date], Dict[str, SellerLines]]:
        """The order's local placement day and its lines grouped by seller."""

    @abstractmethod
    def add_placed(self, seller_id: str, day: date, share: SellerLines) -> None:
        """Count a new order's lines and sales for one seller."""

    @abstractmethod
    def move_lines(self, seller_id: str, from_field: str, to_field: str, lines: int) -> None:
        """Move ``lines`` between two status counters of the seller summary."""

    @abstractmethod
    def get_summary(self, seller_id: str) -> Optional[SellerSalesSummary]:
        """The seller's counters, ``None`` before the first sale."""

    @abstractmethod
    def sales_since(self, seller_id: str, start: date) -> Decimal:
        """Sum of daily sales from ``start`` (inclusive) on."""

    @abstractmethod
    def replace_rollups(self, seller_id: str) -> SellerSalesSummary:
        """Recompute the seller's counters and daily buckets from order lines."""

    @abstractmethod
    def seller_ids(self) -> List[str]:
        """Every seller that has at least one order line."""
