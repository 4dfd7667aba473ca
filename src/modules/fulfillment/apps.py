from django.apps import AppConfig


class FulfillmentConfig(AppConfig):
    name = "modules.fulfillment"
    label = "fulfillment"

    def ready(self) -> None:
        from modules.fulfillment.handlers import (
            seller_rollup_on_order_placed,
            seller_rollup_on_status_changed,
        )
        from modules.orders.events import OrderPlaced, OrderStatusChanged
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderPlaced, seller_rollup_on_order_placed)
        event_bus.subscribe(OrderStatusChanged, seller_rollup_on_status_changed)
