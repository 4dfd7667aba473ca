"""Order service layer (Use Cases).

Owns the order ledger: placement at checkout and the two forward
transitions (seller ships, buyer confirms receipt).  Status writes lock
the order row and are atomic; the service defines the unit of work.

Business rules enforced:
- New orders always start ``pending``.
- Transitions follow ``VALID_TRANSITIONS``; ``completed`` requires ``shipped``.
- Only a seller with a product in the order may ship it.
- Only the buyer may complete it.
- Every placement and transition is recorded in the status history.
- Storage failures surface as ``UpdateFailed``; nothing is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.core.identity import require_identity
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidTransition,
    NotOrderSeller,
    OrderNotFound,
    UpdateFailed,
)
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

UPDATE_FAILED_MESSAGE = "Failed to update status. Try again."


class OrderService:
    """Application service for Order use-cases.

    Receives the repository and the event bus via constructor injection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._bus = event_bus if event_bus is not None else default_event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Persist a ``pending`` order with its line snapshots.

        Stock is not touched here: checkout has already decremented it
        inside the same transaction.
        """
        log = logger.bind(buyer_id=dto.buyer_id)

        order = self._order_repo.create(dto)
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.PENDING,
            changed_by=dto.buyer_id,
            notes="Order placed",
        )
        order.add_domain_event(OrderPlaced(aggregate_id=order.id, buyer_id=dto.buyer_id))
        self._publish(order)

        log.info(
            "order.placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total=str(order.total_amount),
        )
        return order

    def mark_shipped(self, order_id: str, seller_id: Optional[str]) -> Order:
        """Seller-side transition ``pending|paid -> shipped``.

        Raises:
            Unauthenticated: no signed-in user.
            OrderNotFound: the order does not exist.
            NotOrderSeller: the caller sells nothing in this order.
            InvalidTransition: the order cannot be shipped from its status.
            UpdateFailed: the write failed.
        """
        seller_id = require_identity(seller_id)
        log = logger.bind(order_id=str(order_id), seller_id=seller_id)
        try:
            with transaction.atomic():
                order = self._order_repo.get_for_update(order_id)
                if not order:
                    raise OrderNotFound(f"Order {order_id} not found.")
                if not self._order_repo.order_has_seller(order.id, seller_id):
                    log.warning("order.ship_not_seller")
                    raise NotOrderSeller("Only a seller in this order can ship it.")
                order = self._transition(
                    order, OrderStatus.SHIPPED, actor=seller_id, notes="Marked as shipped"
                )
        except DatabaseError as exc:
            log.exception("order.ship_failed")
            raise UpdateFailed(UPDATE_FAILED_MESSAGE) from exc
        log.info("order.shipped")
        return order

    def mark_completed(self, order_id: str, buyer_id: Optional[str]) -> Order:
        """Buyer-side transition ``shipped -> completed``.

        Raises:
            Unauthenticated: no signed-in user.
            OrderNotFound: no such order for this buyer.
            InvalidTransition: the order has not been shipped.
            UpdateFailed: the write failed.
        """
        buyer_id = require_identity(buyer_id)
        log = logger.bind(order_id=str(order_id), buyer_id=buyer_id)
        try:
            with transaction.atomic():
                order = self._order_repo.get_for_update(order_id)
                if not order or order.buyer_id != buyer_id:
                    raise OrderNotFound(f"Order {order_id} not found.")
                order = self._transition(
                    order, OrderStatus.COMPLETED, actor=buyer_id, notes="Order received"
                )
        except DatabaseError as exc:
            log.exception("order.complete_failed")
            raise UpdateFailed(UPDATE_FAILED_MESSAGE) from exc
        log.info("order.completed")
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, buyer_id: Optional[str]) -> Order:
        """Raises ``OrderNotFound`` unless the order belongs to ``buyer_id``."""
        buyer_id = require_identity(buyer_id)
        order = self._order_repo.get_by_id(order_id)
        if not order or order.buyer_id != buyer_id:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(
        self, buyer_id: Optional[str], filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet[Order]:
        """The buyer's orders, newest first."""
        buyer_id = require_identity(buyer_id)
        queryset = self._order_repo.list_for_buyer(buyer_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _transition(self, order: Order, new_status: str, actor: str, notes: str) -> Order:
        old_status = order.status
        if not order.can_transition_to(new_status):
            logger.warning(
                "order.invalid_transition",
                order_id=str(order.id),
                current_status=old_status,
                new_status=new_status,
            )
            if order.is_terminal:
                raise InvalidTransition(f"This order is already {old_status}.")
            raise InvalidTransition(
                f"Cannot change order status from {old_status} to {new_status}."
            )

        order.status = new_status
        if new_status == OrderStatus.SHIPPED:
            order.shipped_at = timezone.now()
        elif new_status == OrderStatus.COMPLETED:
            order.completed_at = timezone.now()
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            new_status=new_status,
            old_status=old_status,
            changed_by=actor,
            notes=notes,
        )
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        self._publish(order)
        return order

    def _publish(self, order: Order) -> None:
        self._bus.publish_all(order.pull_domain_events())
