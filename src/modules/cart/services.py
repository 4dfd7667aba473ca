"""Cart service layer (Use Cases).

Guards applied by ``add_item``, in this order:

1. a signed-in user is required;
2. the product must exist and not be withdrawn;
3. sellers cannot buy their own products;
4. the product must have stock;
5. a product appears at most once per cart (also a unique constraint).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import DatabaseError, IntegrityError, transaction

from modules.cart.exceptions import (
    CannotBuyOwnProduct,
    DuplicateItem,
    OutOfStock,
    RemovalFailed,
)
from modules.core.identity import require_identity
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.cart.models import CartEntry
    from modules.cart.repositories.interfaces import ICartRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(
        self,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._cart_repo = cart_repository
        self._product_repo = product_repository

    @transaction.atomic
    def add_item(self, user_id: Optional[str], product_id: str) -> CartEntry:
        """Add ``product_id`` to the caller's cart with quantity 1.

        Raises:
            Unauthenticated: no signed-in user.
            ProductNotFound: the product does not exist or was withdrawn.
            CannotBuyOwnProduct: the caller listed this product.
            OutOfStock: the product has no stock left.
            DuplicateItem: the product is already in the cart.
        """
        user_id = require_identity(user_id)
        log = logger.bind(user_id=user_id, product_id=str(product_id))

        product = self._product_repo.get_by_id(product_id)
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        if product.is_owned_by(user_id):
            log.warning("cart.own_product_rejected")
            raise CannotBuyOwnProduct("You cannot buy your own product.")
        if product.stock <= 0:
            log.warning("cart.out_of_stock")
            raise OutOfStock("This product is out of stock.")
        if self._cart_repo.exists(user_id, product.id):
            log.info("cart.duplicate_rejected")
            raise DuplicateItem("This item is already in your cart!")

        try:
            with transaction.atomic():
                entry = self._cart_repo.create(user_id, product)
        except IntegrityError as exc:
            # Lost a race with a concurrent add of the same product.
            log.info("cart.duplicate_rejected")
            raise DuplicateItem("This item is already in your cart!") from exc

        log.info("cart.item_added", entry_id=str(entry.id))
        return entry

    def remove_item(self, user_id: Optional[str], entry_id: str) -> None:
        """Delete an entry; removing an absent entry is a success."""
        user_id = require_identity(user_id)
        try:
            removed = self._cart_repo.delete(user_id, entry_id)
        except DatabaseError as exc:
            logger.exception("cart.removal_failed", user_id=user_id, entry_id=str(entry_id))
            raise RemovalFailed("Failed to remove item. Try again.") from exc
        logger.info(
            "cart.item_removed",
            user_id=user_id,
            entry_id=str(entry_id),
            already_absent=not removed,
        )

    def list_items(self, user_id: Optional[str]) -> List[CartEntry]:
        if not user_id:
            return []
        return self._cart_repo.list_for_user(user_id)
