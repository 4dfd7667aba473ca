"""Transient checkout selection over a user's cart.

Which entries are ticked, and with what quantity, is client state: it is
never written back to the cart.  The checkout start request carries the
result, and ``CheckoutService.start`` replays it through this class.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Iterable, List, Set

from modules.cart.exceptions import CartEntryNotFound

if TYPE_CHECKING:
    from modules.cart.models import CartEntry


@dataclass(frozen=True)
class SelectedLine:
    entry: CartEntry
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.entry.price * self.quantity


class CartSelection:
    """Nothing is selected initially; quantities start from the cart's."""

    def __init__(self, entries: Iterable[CartEntry]) -> None:
        self._entries: List[CartEntry] = list(entries)
        self._quantities: Dict[str, int] = {
            str(e.id): max(e.quantity or 1, 1) for e in self._entries
        }
        self._selected: Set[str] = set()

    def _key(self, entry_id) -> str:
        key = str(entry_id)
        if key not in self._quantities:
            raise CartEntryNotFound(f"Cart entry {entry_id} not found.")
        return key

    def toggle(self, entry_id) -> bool:
        """Flip the entry's selection; returns whether it is now selected."""
        key = self._key(entry_id)
        if key in self._selected:
            self._selected.discard(key)
            return False
        self._selected.add(key)
        return True

    def select(self, entry_id) -> None:
        self._selected.add(self._key(entry_id))

    def deselect(self, entry_id) -> None:
        self._selected.discard(self._key(entry_id))

    def is_selected(self, entry_id) -> bool:
        return str(entry_id) in self._selected

    def set_quantity(self, entry_id, quantity: int) -> None:
        """Quantities below 1 are ignored."""
        key = self._key(entry_id)
        if quantity < 1:
            return
        self._quantities[key] = quantity

    def quantity_of(self, entry_id) -> int:
        return self._quantities[self._key(entry_id)]

    @property
    def selected_entries(self) -> List[SelectedLine]:
        """Selected lines in cart order."""
        return [
            SelectedLine(entry=e, quantity=self._quantities[str(e.id)])
            for e in self._entries
            if str(e.id) in self._selected
        ]

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.selected_entries), Decimal("0.00"))

    def clear(self) -> None:
        self._selected.clear()

    def __len__(self) -> int:
        return len(self._selected)
