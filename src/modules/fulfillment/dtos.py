"""Fulfillment DTOs."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


@dataclass
class SellerLines:
    """One seller's share of a single order."""

    lines: int = 0
    quantity: int = 0
    amount: Decimal = Decimal("0.00")

    def add(self, quantity: int, amount: Decimal) -> None:
        self.lines += 1
        self.quantity += quantity
        self.amount += amount


class SellerSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    sales_today: Decimal = Decimal("0.00")
    earnings_this_month: Decimal = Decimal("0.00")
    pending_to_ship: int = 0
    total_orders: int = 0
    completed_orders: int = 0
