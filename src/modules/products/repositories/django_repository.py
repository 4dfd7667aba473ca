"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Methods return ``None`` / ``False`` instead of raising HTTP-level
exceptions; the Service Layer decides how to translate a missing
entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for withdrawn, non-existent or malformed IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), owner_id=entity.owner_id)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product; ``False`` when no live product has this ID."""
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    def decrement_stock(self, id: str, quantity: int) -> bool:
        # Single UPDATE ... WHERE stock >= quantity: the check and the write
        # cannot interleave with another checkout.
        updated = (
            Product.objects.alive()
            .filter(id=id, stock__gte=quantity)
            .update(stock=F("stock") - quantity)
        )
        if not updated:
            logger.warning("product.stock_guard_failed", product_id=str(id), quantity=quantity)
            return False
        logger.info("product.stock_decremented", product_id=str(id), quantity=quantity)
        return True
