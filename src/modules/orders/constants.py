"""Order domain constants.

Status choices and the transition table of the order state machine.
``paid`` is reserved: it has a row in the table but nothing produces it.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    SHIPPED = "shipped", "Shipped"
    COMPLETED = "completed", "Completed"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED},
    OrderStatus.PAID: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED}

# Counted as "pending to ship" in seller rollups.
AWAITING_SHIPMENT_STATES: set[str] = {OrderStatus.PENDING, OrderStatus.PAID}


class PaymentMethod(models.TextChoices):
    COD = "cod", "Cash on delivery"
    MOBILE_WALLET = "mobile_wallet", "Mobile wallet"
    CARD = "card", "Card"


ORDER_NUMBER_MAX_RETRIES = 5
