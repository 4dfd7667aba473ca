"""Django ORM implementation of the Cart repository."""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.cart.models import CartEntry
from modules.cart.repositories.interfaces import ICartRepository
from modules.products.models import Product

logger = structlog.get_logger(__name__)


class CartDjangoRepository(ICartRepository):
    def get_for_user(self, user_id: str, entry_id: str) -> Optional[CartEntry]:
        try:
            return (
                CartEntry.objects.select_related("product")
                .filter(id=entry_id, user_id=user_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list_for_user(self, user_id: str) -> List[CartEntry]:
        return list(
            CartEntry.objects.select_related("product")
            .filter(user_id=user_id)
            .order_by("created_at", "id")
        )

    def exists(self, user_id: str, product_id: str) -> bool:
        return CartEntry.objects.filter(user_id=user_id, product_id=product_id).exists()

    def create(self, user_id: str, product: Product) -> CartEntry:
        return CartEntry.objects.create(
            user_id=user_id,
            product=product,
            name=product.name,
            price=product.price,
            image=product.image,
            quantity=1,
        )

    def delete(self, user_id: str, entry_id: str) -> bool:
        try:
            deleted, _ = CartEntry.objects.filter(id=entry_id, user_id=user_id).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0

    def lock_entries(self, user_id: str, entry_ids: Iterable[str]) -> int:
        locked = (
            CartEntry.objects.select_for_update()
            .filter(user_id=user_id, id__in=list(entry_ids))
            .values_list("id", flat=True)
        )
        return len(list(locked))

    def delete_many(self, user_id: str, entry_ids: Iterable[str]) -> int:
        deleted, _ = CartEntry.objects.filter(
            user_id=user_id, id__in=list(entry_ids)
        ).delete()
        logger.info("cart.entries_deleted", user_id=user_id, count=deleted)
        return deleted
