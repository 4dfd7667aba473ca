"""Checkout DTOs (Pydantic v2).

The payment input is a closed tagged union on ``method``: each variant
validates its own fields and reduces itself to the ``PaymentSummaryDTO``
that is persisted.  Raw card numbers and CVVs never leave these objects.
"""

from __future__ import annotations

import re
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import PaymentSummaryDTO

WALLET_NUMBER_LENGTH = 11
MIN_CARD_DIGITS = 16
MAX_LINE_QUANTITY = 999

WALLET_ERROR = "Please enter a valid mobile wallet number (11 digits)."
CARD_ERROR = "Please fill in all card details correctly."
METHOD_ERROR = "Please choose a payment method."
DELIVERY_ERROR = "Please fill in all required delivery fields."
STALE_SELECTION_ERROR = "Some selected items are no longer in your cart."


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------


class SelectionDTO(BaseModel):
    """One ticked cart entry; ``quantity`` defaults to the cart's."""

    model_config = ConfigDict(frozen=True)

    entry_id: UUID
    quantity: Optional[int] = Field(default=None, le=MAX_LINE_QUANTITY)


class StartCheckoutDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    selections: List[SelectionDTO] = []


# ---------------------------------------------------------------------------
# Payment (tagged union)
# ---------------------------------------------------------------------------


class CashOnDeliveryPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal["cod"] = "cod"

    def to_summary(self) -> PaymentSummaryDTO:
        return PaymentSummaryDTO(method=PaymentMethod.COD)


class MobileWalletPayment(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)

    method: Literal["mobile_wallet"] = "mobile_wallet"
    wallet_number: str = ""

    @field_validator("wallet_number", mode="before")
    @classmethod
    def exactly_eleven_digits(cls, v) -> str:
        number = re.sub(r"[\s-]", "", str(v or ""))
        if len(number) != WALLET_NUMBER_LENGTH or not number.isdigit():
            raise ValueError(WALLET_ERROR)
        return number

    def to_summary(self) -> PaymentSummaryDTO:
        return PaymentSummaryDTO(
            method=PaymentMethod.MOBILE_WALLET, wallet_number=self.wallet_number
        )


class CardPayment(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: Literal["card"] = "card"
    card_number: str = ""
    card_name: str = ""
    expiry: str = ""
    cvv: str = ""

    @model_validator(mode="after")
    def all_fields_present(self):
        fields = (self.card_number, self.card_name, self.expiry, self.cvv)
        if not all(f and f.strip() for f in fields):
            raise ValueError(CARD_ERROR)
        if len(re.sub(r"\D", "", self.card_number)) < MIN_CARD_DIGITS:
            raise ValueError(CARD_ERROR)
        return self

    def to_summary(self) -> PaymentSummaryDTO:
        digits = re.sub(r"\D", "", self.card_number)
        return PaymentSummaryDTO(
            method=PaymentMethod.CARD,
            card_last4=digits[-4:],
            card_name=self.card_name.strip(),
        )

    def __repr__(self) -> str:
        return f"CardPayment(card_last4={re.sub(r'[^0-9]', '', self.card_number)[-4:]!r})"


PaymentInput = Annotated[
    Union[CashOnDeliveryPayment, MobileWalletPayment, CardPayment],
    Field(discriminator="method"),
]

payment_adapter: TypeAdapter[PaymentInput] = TypeAdapter(PaymentInput)
