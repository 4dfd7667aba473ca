"""Integration tests for the Order API.

Covers:
- Buyer order tracking: list (paginated, filtered) and retrieve.
- Seller ships, buyer completes, with timestamps and history.
- Rejected transitions and ownership checks.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import (
    DeliveryDetailsDTO,
    OrderLineDTO,
    PaymentSummaryDTO,
    PlaceOrderDTO,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


@pytest.fixture()
def place_order(buyer, make_product, delivery_data):
    service = OrderService(order_repository=OrderDjangoRepository())

    def _place(product=None, quantity=1, buyer_id=None):
        product = product or make_product()
        return service.place_order(
            PlaceOrderDTO(
                buyer_id=buyer_id or str(buyer.pk),
                lines=[
                    OrderLineDTO(
                        product_id=product.id,
                        name=product.name,
                        unit_price=product.price,
                        quantity=quantity,
                    )
                ],
                delivery=DeliveryDetailsDTO(**delivery_data),
                payment=PaymentSummaryDTO(method=PaymentMethod.COD),
            )
        )

    return _place


class TestOrderTracking:
    def test_list_own_orders(self, buyer_client, place_order, make_user):
        mine = place_order()
        place_order(buyer_id=str(make_user("someone-else").pk))

        response = buyer_client.get(URL)

        assert response.status_code == 200
        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == str(mine.id)
        assert response.data["results"][0]["order_number"].startswith("GC-")

    def test_filter_by_status(self, buyer_client, seller_client, place_order):
        shipped = place_order()
        place_order()
        seller_client.post(f"{URL}{shipped.id}/ship/")

        response = buyer_client.get(URL, {"status": "shipped"})

        assert [o["id"] for o in response.data["results"]] == [str(shipped.id)]

    def test_retrieve(self, buyer_client, place_order):
        order = place_order(quantity=2)

        response = buyer_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.PENDING
        assert response.data["items"][0]["quantity"] == 2
        assert response.data["status_history"][0]["new_status"] == OrderStatus.PENDING

    def test_other_buyer_gets_404(self, client_for, make_user, place_order):
        order = place_order()
        stranger = client_for(make_user("stranger"))

        response = stranger.get(f"{URL}{order.id}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"


class TestTransitions:
    def test_ship_then_complete(self, buyer_client, seller_client, place_order):
        order = place_order()

        shipped = seller_client.post(f"{URL}{order.id}/ship/")
        assert shipped.status_code == 200
        assert shipped.data["status"] == OrderStatus.SHIPPED
        assert shipped.data["shipped_at"] is not None

        completed = buyer_client.post(f"{URL}{order.id}/complete/")
        assert completed.status_code == 200
        assert completed.data["status"] == OrderStatus.COMPLETED
        assert completed.data["shipped_at"] is not None
        assert completed.data["completed_at"] is not None
        assert [h["new_status"] for h in completed.data["status_history"]] == [
            OrderStatus.PENDING,
            OrderStatus.SHIPPED,
            OrderStatus.COMPLETED,
        ]

    def test_complete_pending_rejected(self, buyer_client, place_order):
        order = place_order()

        response = buyer_client.post(f"{URL}{order.id}/complete/")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_transition"

    def test_ship_twice_rejected(self, seller_client, place_order):
        order = place_order()
        seller_client.post(f"{URL}{order.id}/ship/")

        response = seller_client.post(f"{URL}{order.id}/ship/")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_transition"

    def test_only_order_seller_can_ship(self, client_for, make_user, place_order):
        order = place_order()
        other_seller = client_for(make_user("other-seller"))

        response = other_seller.post(f"{URL}{order.id}/ship/")

        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "not_order_seller"

    def test_unknown_order(self, seller_client):
        assert seller_client.post(f"{URL}{uuid4()}/ship/").status_code == 404
