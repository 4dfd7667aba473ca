"""Product repository interface.

Extends ``IRepository[Product]`` with the conditional stock decrement
used by checkout.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List live products with optional filters."""

    @abstractmethod
    def decrement_stock(self, id: str, quantity: int) -> bool:
        """Decrement stock by ``quantity`` only if enough is left.

        Returns ``False`` (and changes nothing) when the product is gone
        or its current stock is below ``quantity``.
        """
