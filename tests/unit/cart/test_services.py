"""Unit tests for CartService.

Covers:
- add_item guards, in order: sign-in, product exists, own product,
  out of stock, duplicate.
- A unique-constraint race on create surfaces as DuplicateItem.
- remove_item: success, idempotent on absent entries, storage failure.
- list_items for anonymous callers.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import DatabaseError, IntegrityError

from modules.cart.exceptions import (
    CannotBuyOwnProduct,
    DuplicateItem,
    OutOfStock,
    RemovalFailed,
)
from modules.cart.models import CartEntry
from modules.cart.services import CartService
from modules.core.exceptions import Unauthenticated
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def cart_repo():
    repo = MagicMock()
    repo.exists.return_value = False
    repo.create.side_effect = lambda user_id, product: CartEntry(
        user_id=user_id, product=product, name=product.name, price=product.price
    )
    return repo


@pytest.fixture()
def product_repo():
    return MagicMock()


@pytest.fixture()
def service(cart_repo, product_repo):
    return CartService(cart_repository=cart_repo, product_repository=product_repo)


def _product(stock=5, owner_id="seller-1") -> Product:
    return Product(name="Bamboo Cutlery", price=Decimal("300.00"), stock=stock, owner_id=owner_id)


# ===========================================================================
# add_item
# ===========================================================================


class TestAddItem:
    def test_success_snapshots_product(self, service, cart_repo, product_repo):
        product = _product()
        product_repo.get_by_id.return_value = product

        entry = service.add_item("buyer-1", str(product.id))

        assert entry.user_id == "buyer-1"
        assert entry.price == Decimal("300.00")
        assert entry.quantity == 1
        cart_repo.create.assert_called_once_with("buyer-1", product)

    def test_requires_sign_in(self, service, product_repo):
        with pytest.raises(Unauthenticated):
            service.add_item(None, "any")
        product_repo.get_by_id.assert_not_called()

    def test_missing_product(self, service, product_repo):
        product_repo.get_by_id.return_value = None
        with pytest.raises(ProductNotFound):
            service.add_item("buyer-1", "missing")

    def test_own_product_rejected(self, service, cart_repo, product_repo):
        product_repo.get_by_id.return_value = _product(owner_id="buyer-1")

        with pytest.raises(CannotBuyOwnProduct, match="your own product"):
            service.add_item("buyer-1", "p")
        cart_repo.create.assert_not_called()

    def test_own_product_checked_before_stock(self, service, product_repo):
        product_repo.get_by_id.return_value = _product(stock=0, owner_id="buyer-1")
        with pytest.raises(CannotBuyOwnProduct):
            service.add_item("buyer-1", "p")

    def test_out_of_stock(self, service, cart_repo, product_repo):
        product_repo.get_by_id.return_value = _product(stock=0)

        with pytest.raises(OutOfStock, match="out of stock"):
            service.add_item("buyer-1", "p")
        cart_repo.create.assert_not_called()

    def test_duplicate_rejected(self, service, cart_repo, product_repo):
        product_repo.get_by_id.return_value = _product()
        cart_repo.exists.return_value = True

        with pytest.raises(DuplicateItem, match="already in your cart"):
            service.add_item("buyer-1", "p")
        cart_repo.create.assert_not_called()

    def test_unique_constraint_race_is_duplicate(self, service, cart_repo, product_repo):
        product_repo.get_by_id.return_value = _product()
        cart_repo.create.side_effect = IntegrityError("unique")

        with pytest.raises(DuplicateItem):
            service.add_item("buyer-1", "p")


# ===========================================================================
# remove_item / list_items
# ===========================================================================


class TestRemoveItem:
    def test_success(self, service, cart_repo):
        cart_repo.delete.return_value = True
        service.remove_item("buyer-1", "entry-1")
        cart_repo.delete.assert_called_once_with("buyer-1", "entry-1")

    def test_absent_entry_is_success(self, service, cart_repo):
        cart_repo.delete.return_value = False
        service.remove_item("buyer-1", "entry-1")

    def test_storage_failure(self, service, cart_repo):
        cart_repo.delete.side_effect = DatabaseError("down")
        with pytest.raises(RemovalFailed, match="Failed to remove item"):
            service.remove_item("buyer-1", "entry-1")


class TestListItems:
    def test_anonymous_gets_empty_list(self, service, cart_repo):
        assert service.list_items(None) == []
        cart_repo.list_for_user.assert_not_called()

    def test_delegates(self, service, cart_repo):
        cart_repo.list_for_user.return_value = ["e"]
        assert service.list_items("buyer-1") == ["e"]
