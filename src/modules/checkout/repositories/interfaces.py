"""Checkout repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from modules.cart.selection import SelectedLine
    from modules.checkout.models import CheckoutLine, CheckoutSession
    from modules.profiles.dtos import DeliveryPrefillDTO


class ICheckoutRepository(ABC):
    """Sessions are always looked up through their buyer."""

    @abstractmethod
    def create(
        self,
        buyer_id: str,
        lines: Sequence[SelectedLine],
        prefill: DeliveryPrefillDTO,
    ) -> CheckoutSession:
        """Open a session in the delivery step with snapshotted lines."""

    @abstractmethod
    def get_for_buyer(self, buyer_id: str, session_id: str) -> Optional[CheckoutSession]:
        """The session, or ``None`` when absent or owned by someone else."""

    @abstractmethod
    def get_for_update(self, buyer_id: str, session_id: str) -> Optional[CheckoutSession]:
        """Same as ``get_for_buyer`` with a row-level lock."""

    @abstractmethod
    def lines_of(self, session: CheckoutSession) -> List[CheckoutLine]:
        """Lines in selection order."""

    @abstractmethod
    def save(self, session: CheckoutSession) -> CheckoutSession:
        """Persist the session."""

    @abstractmethod
    def delete(self, session: CheckoutSession) -> None:
        """Discard the session and its lines."""
