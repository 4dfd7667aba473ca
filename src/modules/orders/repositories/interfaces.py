"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the order ledger needs:
atomic creation with items, row-locked reads for transitions, status
history, and the seller ownership check.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderItem children and OrderStatusHistory
    records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, dto: PlaceOrderDTO) -> Order:
        """Create a pending order and its items; the total is computed here."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list_for_buyer(self, buyer_id: str) -> QuerySet[Order]:
        """The buyer's orders, newest first."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        changed_by: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def order_has_seller(self, order_id: UUID, seller_id: str) -> bool:
        """Whether any line of the order is a product owned by ``seller_id``."""
