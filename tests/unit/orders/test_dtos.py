"""Unit tests for order DTOs.

Covers:
- DeliveryDetailsDTO: required fields, notes optional.
- PaymentSummaryDTO: fields must match the method; details() excludes method.
- OrderLineDTO / PlaceOrderDTO: quantity, empty lines, duplicates, total.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import (
    REQUIRED_DELIVERY_FIELDS,
    DeliveryDetailsDTO,
    OrderLineDTO,
    PaymentSummaryDTO,
    PlaceOrderDTO,
)

pytestmark = pytest.mark.unit

DELIVERY = {
    "full_name": "Maria Santos",
    "phone": "09171234567",
    "address": "12 Mabini St.",
    "city": "Quezon City",
    "postal_code": "1100",
}


class TestDeliveryDetails:
    def test_notes_optional(self):
        dto = DeliveryDetailsDTO(**DELIVERY)
        assert dto.notes == ""

    @pytest.mark.parametrize("field", REQUIRED_DELIVERY_FIELDS)
    def test_blank_required_field(self, field):
        data = {**DELIVERY, field: "   "}
        with pytest.raises(ValidationError, match="This field is required"):
            DeliveryDetailsDTO(**data)

    def test_phone_longer_than_column(self):
        with pytest.raises(ValidationError) as exc_info:
            DeliveryDetailsDTO(**{**DELIVERY, "phone": "0" * 33})
        assert exc_info.value.errors()[0]["loc"] == ("phone",)

    def test_values_are_stripped(self):
        dto = DeliveryDetailsDTO(**{**DELIVERY, "city": "  Makati  ", "notes": " gate "})
        assert dto.city == "Makati"
        assert dto.notes == "gate"


class TestPaymentSummary:
    def test_cod_has_no_details(self):
        assert PaymentSummaryDTO(method=PaymentMethod.COD).details() == {}

    def test_card_details(self):
        dto = PaymentSummaryDTO(method=PaymentMethod.CARD, card_last4="4242", card_name="M SANTOS")
        assert dto.details() == {"card_last4": "4242", "card_name": "M SANTOS"}

    def test_wallet_requires_number(self):
        with pytest.raises(ValidationError):
            PaymentSummaryDTO(method=PaymentMethod.MOBILE_WALLET)

    def test_card_requires_last4_and_name(self):
        with pytest.raises(ValidationError):
            PaymentSummaryDTO(method=PaymentMethod.CARD, card_last4="4242")

    def test_unknown_method(self):
        with pytest.raises(ValidationError):
            PaymentSummaryDTO(method="crypto")


class TestPlaceOrder:
    def _line(self, **overrides):
        data = {
            "product_id": uuid4(),
            "name": "Loofah Sponge",
            "unit_price": Decimal("80.00"),
            "quantity": 2,
        }
        data.update(overrides)
        return OrderLineDTO(**data)

    def _dto(self, lines):
        return PlaceOrderDTO(
            buyer_id="buyer-1",
            lines=lines,
            delivery=DeliveryDetailsDTO(**DELIVERY),
            payment=PaymentSummaryDTO(method=PaymentMethod.COD),
        )

    def test_total_sums_lines(self):
        dto = self._dto([self._line(), self._line(unit_price=Decimal("500"), quantity=1)])
        assert dto.total == Decimal("660.00")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="at least 1"):
            self._line(quantity=0)

    def test_empty_lines_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            self._dto([])

    def test_duplicate_products_rejected(self):
        product_id = uuid4()
        with pytest.raises(ValidationError, match="Duplicate product"):
            self._dto([self._line(product_id=product_id), self._line(product_id=product_id)])
