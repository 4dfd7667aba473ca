"""Unit tests for OrderService.

Covers:
- place_order: persists, records history, publishes OrderPlaced.
- mark_shipped: seller check, transition, timestamp, history, event.
- mark_completed: buyer check, requires shipped, timestamp.
- Storage failures surface as UpdateFailed.
- get_order / list_orders scoping to the buyer.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.db import DatabaseError

from modules.core.exceptions import Unauthenticated
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import (
    DeliveryDetailsDTO,
    OrderLineDTO,
    PaymentSummaryDTO,
    PlaceOrderDTO,
)
from modules.orders.events import OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidTransition,
    NotOrderSeller,
    OrderNotFound,
    UpdateFailed,
)
from modules.orders.models import Order
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class RecordingHandler:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


@pytest.fixture()
def bus():
    return InMemoryEventBus()


@pytest.fixture()
def recorder(bus):
    handler = RecordingHandler()
    bus.subscribe(OrderPlaced, handler)
    bus.subscribe(OrderStatusChanged, handler)
    return handler


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.order_has_seller.return_value = True
    repo.save.side_effect = lambda o: o
    return repo


@pytest.fixture()
def service(mock_repo, bus):
    return OrderService(order_repository=mock_repo, event_bus=bus)


def _order(status=OrderStatus.PENDING, buyer_id="buyer-1") -> Order:
    return Order(
        buyer_id=buyer_id,
        status=status,
        total_amount=Decimal("1000.00"),
        payment_method=PaymentMethod.COD,
    )


def _place_dto() -> PlaceOrderDTO:
    return PlaceOrderDTO(
        buyer_id="buyer-1",
        lines=[
            OrderLineDTO(
                product_id=uuid4(), name="Bamboo Toothbrush", unit_price=Decimal("500"), quantity=2
            )
        ],
        delivery=DeliveryDetailsDTO(
            full_name="Maria Santos",
            phone="09171234567",
            address="12 Mabini St.",
            city="Quezon City",
            postal_code="1100",
        ),
        payment=PaymentSummaryDTO(method=PaymentMethod.COD),
    )


# ===========================================================================
# place_order
# ===========================================================================


class TestPlaceOrder:
    def test_creates_pending_order_with_history(self, service, mock_repo, recorder):
        created = _order()
        mock_repo.create.return_value = created

        order = service.place_order(_place_dto())

        assert order is created
        mock_repo.create.assert_called_once()
        history = mock_repo.add_history.call_args.kwargs
        assert history["new_status"] == OrderStatus.PENDING
        assert history["changed_by"] == "buyer-1"

        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert isinstance(event, OrderPlaced)
        assert event.aggregate_id == created.id
        assert event.buyer_id == "buyer-1"
        assert created.domain_events == []


# ===========================================================================
# mark_shipped
# ===========================================================================


class TestMarkShipped:
    def test_success(self, service, mock_repo, recorder):
        order = _order()
        mock_repo.get_for_update.return_value = order

        result = service.mark_shipped(str(order.id), "seller-1")

        assert result.status == OrderStatus.SHIPPED
        assert result.shipped_at is not None
        mock_repo.save.assert_called_once_with(order)
        history = mock_repo.add_history.call_args.kwargs
        assert history["old_status"] == OrderStatus.PENDING
        assert history["new_status"] == OrderStatus.SHIPPED
        assert history["changed_by"] == "seller-1"

        event = recorder.events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert (event.old_status, event.new_status) == ("pending", "shipped")

    def test_paid_order_can_ship(self, service, mock_repo):
        order = _order(status=OrderStatus.PAID)
        mock_repo.get_for_update.return_value = order
        assert service.mark_shipped(str(order.id), "seller-1").status == OrderStatus.SHIPPED

    def test_not_found(self, service, mock_repo):
        mock_repo.get_for_update.return_value = None
        with pytest.raises(OrderNotFound):
            service.mark_shipped("missing", "seller-1")

    def test_non_seller_rejected(self, service, mock_repo):
        order = _order()
        mock_repo.get_for_update.return_value = order
        mock_repo.order_has_seller.return_value = False

        with pytest.raises(NotOrderSeller):
            service.mark_shipped(str(order.id), "stranger")
        mock_repo.save.assert_not_called()
        assert order.status == OrderStatus.PENDING

    def test_already_shipped(self, service, mock_repo, recorder):
        mock_repo.get_for_update.return_value = _order(status=OrderStatus.SHIPPED)

        with pytest.raises(InvalidTransition, match="from shipped to shipped"):
            service.mark_shipped("o", "seller-1")
        assert recorder.events == []

    def test_storage_failure(self, service, mock_repo):
        mock_repo.get_for_update.return_value = _order()
        mock_repo.save.side_effect = DatabaseError("disk full")

        with pytest.raises(UpdateFailed, match="Failed to update status"):
            service.mark_shipped("o", "seller-1")

    def test_requires_sign_in(self, service, mock_repo):
        with pytest.raises(Unauthenticated):
            service.mark_shipped("o", None)
        mock_repo.get_for_update.assert_not_called()


# ===========================================================================
# mark_completed
# ===========================================================================


class TestMarkCompleted:
    def test_success(self, service, mock_repo):
        order = _order(status=OrderStatus.SHIPPED)
        mock_repo.get_for_update.return_value = order

        result = service.mark_completed(str(order.id), "buyer-1")

        assert result.status == OrderStatus.COMPLETED
        assert result.completed_at is not None

    def test_pending_cannot_complete(self, service, mock_repo):
        order = _order()
        mock_repo.get_for_update.return_value = order

        with pytest.raises(InvalidTransition, match="from pending to completed"):
            service.mark_completed(str(order.id), "buyer-1")
        assert order.status == OrderStatus.PENDING
        assert order.completed_at is None

    def test_other_buyer_sees_not_found(self, service, mock_repo):
        mock_repo.get_for_update.return_value = _order(status=OrderStatus.SHIPPED)
        with pytest.raises(OrderNotFound):
            service.mark_completed("o", "buyer-2")

    def test_completed_is_terminal(self, service, mock_repo):
        mock_repo.get_for_update.return_value = _order(status=OrderStatus.COMPLETED)
        with pytest.raises(InvalidTransition, match="already completed"):
            service.mark_completed("o", "buyer-1")


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_get_order_for_buyer(self, service, mock_repo):
        order = _order()
        mock_repo.get_by_id.return_value = order
        assert service.get_order(str(order.id), "buyer-1") is order

    def test_get_order_hides_other_buyers(self, service, mock_repo):
        mock_repo.get_by_id.return_value = _order()
        with pytest.raises(OrderNotFound):
            service.get_order("o", "buyer-2")

    def test_list_orders_applies_filters(self, service, mock_repo):
        queryset = MagicMock()
        mock_repo.list_for_buyer.return_value = queryset

        service.list_orders("buyer-1", {"status": "pending"})

        mock_repo.list_for_buyer.assert_called_once_with("buyer-1")
        queryset.filter.assert_called_once_with(status="pending")
