"""Order event handlers that keep seller rollups current.

They run inside the publishing transaction, so a rolled-back checkout
or transition never reaches the counters.
"""

from __future__ import annotations

from modules.fulfillment.repositories.django_repository import FulfillmentDjangoRepository
from modules.fulfillment.services import FulfillmentService
from modules.orders.events import OrderPlaced, OrderStatusChanged
from shared.domain.bus import IEventHandler


class SellerRollupOnOrderPlaced(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        FulfillmentService(FulfillmentDjangoRepository()).record_order_placed(event.aggregate_id)


class SellerRollupOnStatusChanged(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        FulfillmentService(FulfillmentDjangoRepository()).record_status_change(
            event.aggregate_id, event.old_status, event.new_status
        )


seller_rollup_on_order_placed = SellerRollupOnOrderPlaced()
seller_rollup_on_status_changed = SellerRollupOnStatusChanged()
