"""Checkout sessions.

A session holds one buyer's in-progress checkout: the selected lines
(snapshotted from the cart with their chosen quantities), the delivery
details, the payment summary and the current step.  Full card data is
never stored; ``payment_details`` holds the same summary an order keeps.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.checkout.constants import STEP_TRANSITIONS, CheckoutStep
from modules.core.models import BaseModel
from modules.orders.constants import PaymentMethod
from modules.orders.dtos import DeliveryDetailsDTO, PaymentSummaryDTO


class CheckoutSession(BaseModel):
    buyer_id = models.CharField(max_length=128, db_index=True)
    step = models.CharField(
        max_length=20,
        choices=CheckoutStep.choices,
        default=CheckoutStep.DELIVERY,
    )

    full_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")
    address = models.TextField(blank=True, default="")
    city = models.CharField(max_length=128, blank=True, default="")
    postal_code = models.CharField(max_length=16, blank=True, default="")
    delivery_notes = models.TextField(blank=True, default="")

    payment_method = models.CharField(
        max_length=20, choices=PaymentMethod.choices, blank=True, default=""
    )
    payment_details = models.JSONField(default=dict, blank=True)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checkout_sessions",
    )
    failure_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "checkout_sessions"
        ordering = ["-created_at"]

    def can_move_to(self, step: str) -> bool:
        return step in STEP_TRANSITIONS.get(self.step, set())

    def apply_delivery(self, details: DeliveryDetailsDTO) -> None:
        self.full_name = details.full_name
        self.phone = details.phone
        self.address = details.address
        self.city = details.city
        self.postal_code = details.postal_code
        self.delivery_notes = details.notes

    def delivery_details(self) -> DeliveryDetailsDTO:
        return DeliveryDetailsDTO(
            full_name=self.full_name,
            phone=self.phone,
            address=self.address,
            city=self.city,
            postal_code=self.postal_code,
            notes=self.delivery_notes,
        )

    def apply_payment(self, summary: PaymentSummaryDTO) -> None:
        self.payment_method = summary.method
        self.payment_details = summary.details()

    def payment_summary(self) -> PaymentSummaryDTO:
        return PaymentSummaryDTO(method=self.payment_method, **self.payment_details)

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines.all()), Decimal("0.00"))

    def __str__(self) -> str:
        return f"checkout {self.id} ({self.step})"


class CheckoutLine(BaseModel):
    session = models.ForeignKey(
        CheckoutSession,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    position = models.PositiveIntegerField(default=0)
    cart_entry_id = models.UUIDField()
    product_id = models.UUIDField()
    name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    image = models.CharField(max_length=500, blank=True, default="")
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "checkout_lines"
        ordering = ["position"]

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"
