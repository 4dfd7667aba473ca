"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Price and stock are never negative (validated by DTO and DB checks).
- Only the owner may edit or withdraw a product.
- Withdrawal is a soft delete.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.core.identity import require_identity
from modules.products.exceptions import ProductNotFound, ProductNotOwned
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, owner_id: Optional[str], dto: CreateProductDTO) -> Product:
        owner_id = require_identity(owner_id)
        product = Product(
            owner_id=owner_id,
            name=dto.name,
            price=dto.price,
            stock=dto.stock,
            description=dto.description,
            image=dto.image,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=str(product.id), owner_id=owner_id)
        return product

    @transaction.atomic
    def update_product(
        self, id: str, owner_id: Optional[str], dto: UpdateProductDTO
    ) -> Product:
        """Apply the supplied fields to an owned product.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductNotOwned: if the caller is not the product's owner.
        """
        product = self._get_owned(id, owner_id)
        log = logger.bind(product_id=str(id))

        for field in ("name", "price", "stock", "description", "image"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        log.info("product.updated")
        return product

    @transaction.atomic
    def delete_product(self, id: str, owner_id: Optional[str]) -> None:
        self._get_owned(id, owner_id)
        self._repo.delete(id)
        logger.info("product.withdrawn", product_id=str(id), owner_id=owner_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Product]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Raises ``ProductNotFound`` when the product is absent or withdrawn."""
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned(self, id: str, owner_id: Optional[str]) -> Product:
        owner_id = require_identity(owner_id)
        product = self.get_product(id)
        if not product.is_owned_by(owner_id):
            logger.warning("product.not_owned", product_id=str(id), user_id=owner_id)
            raise ProductNotOwned("You can only change your own products.")
        return product
