"""Cart repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from modules.cart.models import CartEntry
    from modules.products.models import Product


class ICartRepository(ABC):
    """Repository contract for cart entries, always scoped to one user."""

    @abstractmethod
    def get_for_user(self, user_id: str, entry_id: str) -> Optional[CartEntry]:
        """Return the entry when it exists and belongs to ``user_id``."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[CartEntry]:
        """All entries of ``user_id`` in insertion order."""

    @abstractmethod
    def exists(self, user_id: str, product_id: str) -> bool:
        """Whether ``user_id`` already has an entry for ``product_id``."""

    @abstractmethod
    def create(self, user_id: str, product: Product) -> CartEntry:
        """Create an entry with quantity 1 and a snapshot of ``product``."""

    @abstractmethod
    def delete(self, user_id: str, entry_id: str) -> bool:
        """Delete one entry; ``False`` when it was already absent."""

    @abstractmethod
    def delete_many(self, user_id: str, entry_ids: Iterable[str]) -> int:
        """Delete several entries of ``user_id`` in one statement."""

    @abstractmethod
    def lock_entries(self, user_id: str, entry_ids: Iterable[str]) -> int:
        """Row-lock the given entries of ``user_id``; returns how many still exist."""
