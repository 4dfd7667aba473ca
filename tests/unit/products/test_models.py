"""Unit tests for Product model rules and DTO validation.

Covers:
- Ownership and stock helpers.
- Database check constraints on price and stock.
- Soft delete keeps the row but hides it from ``alive()``.
- Conditional stock decrement in the Django repository.
- CreateProductDTO / UpdateProductDTO validation.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from pydantic import ValidationError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def product():
    return Product.objects.create(
        name="Reusable Straw Set", price=Decimal("150.00"), stock=4, owner_id="seller-1"
    )


class TestProductHelpers:
    def test_is_owned_by(self, product):
        assert product.is_owned_by("seller-1")
        assert not product.is_owned_by("buyer-1")
        assert not product.is_owned_by(None)

    def test_in_stock(self, product):
        assert product.in_stock
        product.stock = 0
        assert not product.in_stock


class TestProductConstraints:
    def test_negative_price_rejected(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Product.objects.create(name="Bad", price=Decimal("-1.00"), owner_id="s")


class TestSoftDelete:
    def test_delete_hides_product(self, product):
        product.delete()

        assert Product.objects.filter(id=product.id).exists()
        assert not Product.objects.alive().filter(id=product.id).exists()
        assert ProductDjangoRepository().get_by_id(str(product.id)) is None

    def test_delete_twice_is_noop(self, product):
        product.delete()
        assert product.delete() == (0, {})


class TestDecrementStock:
    def test_decrements_when_enough(self, product):
        repo = ProductDjangoRepository()

        assert repo.decrement_stock(str(product.id), 3) is True

        product.refresh_from_db()
        assert product.stock == 1

    def test_guard_leaves_stock_untouched(self, product):
        repo = ProductDjangoRepository()

        assert repo.decrement_stock(str(product.id), 5) is False

        product.refresh_from_db()
        assert product.stock == 4

    def test_withdrawn_product_not_decremented(self, product):
        product.delete()
        assert ProductDjangoRepository().decrement_stock(str(product.id), 1) is False


class TestProductDTOs:
    def test_name_is_stripped(self):
        dto = CreateProductDTO(name="  Loofah  ", price=Decimal("80"))
        assert dto.name == "Loofah"
        assert dto.stock == 0

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "   ", "price": Decimal("1")},
            {"name": "Soap", "price": Decimal("-0.01")},
            {"name": "Soap", "price": Decimal("1"), "stock": -1},
            {"name": "S" * 256, "price": Decimal("1")},
        ],
    )
    def test_create_rejects_invalid(self, fields):
        with pytest.raises(ValidationError):
            CreateProductDTO(**fields)

    def test_update_all_optional(self):
        dto = UpdateProductDTO()
        assert dto.name is None and dto.price is None and dto.stock is None

    def test_update_rejects_negative_stock(self):
        with pytest.raises(ValidationError, match="Stock cannot be negative"):
            UpdateProductDTO(stock=-3)
