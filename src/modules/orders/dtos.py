"""Order DTOs for the Service Layer.

Pydantic v2 contracts between checkout and the order ledger.  DTOs are
immutable (``frozen=True``).

- ``DeliveryDetailsDTO``: the delivery value object embedded in orders.
- ``PaymentSummaryDTO``: what is persisted about the payment choice.
- ``OrderLineDTO``: one selected cart line with its snapshot price.
- ``PlaceOrderDTO``: input for order placement.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.orders.constants import PaymentMethod

REQUIRED_DELIVERY_FIELDS = ("full_name", "phone", "address", "city", "postal_code")


class DeliveryDetailsDTO(BaseModel):
    """All fields except ``notes`` are mandatory and must not be blank."""

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(max_length=255)
    phone: str = Field(max_length=32)
    address: str
    city: str = Field(max_length=128)
    postal_code: str = Field(max_length=16)
    notes: str = ""

    @field_validator(*REQUIRED_DELIVERY_FIELDS)
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("This field is required.")
        return v.strip()

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    def as_dict(self) -> dict:
        return self.model_dump()


class PaymentSummaryDTO(BaseModel):
    """Persisted payment summary.  Full card data never reaches this DTO."""

    model_config = ConfigDict(frozen=True)

    method: PaymentMethod
    wallet_number: Optional[str] = None
    card_last4: Optional[str] = None
    card_name: Optional[str] = None

    @model_validator(mode="after")
    def fields_match_method(self):
        if self.method == PaymentMethod.MOBILE_WALLET and not self.wallet_number:
            raise ValueError("Mobile wallet payments need a wallet number.")
        if self.method == PaymentMethod.CARD and not (self.card_last4 and self.card_name):
            raise ValueError("Card payments need the last 4 digits and the holder name.")
        return self

    def details(self) -> dict:
        """The method-specific part, as stored on the order."""
        return self.model_dump(exclude={"method"}, exclude_none=True)


class OrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    name: str
    unit_price: Decimal
    quantity: int
    image: str = ""

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class PlaceOrderDTO(BaseModel):
    """Input for ``OrderService.place_order``.

    Validates:
    - ``lines`` must contain at least one line.
    - A product appears at most once.
    """

    model_config = ConfigDict(frozen=True)

    buyer_id: str
    lines: List[OrderLineDTO]
    delivery: DeliveryDetailsDTO
    payment: PaymentSummaryDTO

    @field_validator("lines")
    @classmethod
    def lines_must_not_be_empty(cls, v: List[OrderLineDTO]) -> List[OrderLineDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        product_ids = [line.product_id for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0.00"))
