"""Unit tests for BaseModel and SoftDeleteModel, exercised through Product
(soft-delete) and CartEntry (plain base model)."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.cart.models import CartEntry
from modules.core.models import SoftDeleteManager, SoftDeleteQuerySet
from modules.products.models import Product

pytestmark = pytest.mark.unit


def _product(name="Bamboo Comb", **overrides) -> Product:
    fields = {"name": name, "price": Decimal("95.00"), "stock": 3, "owner_id": "seller-1"}
    fields.update(overrides)
    return Product.objects.create(**fields)


class TestBaseModel:
    def test_id_is_uuid_version_7(self):
        product = _product()
        assert isinstance(product.id, uuid.UUID)
        assert product.id.version == 7

    def test_updated_at_changes_on_save(self):
        with freeze_time("2026-03-01 08:00:00"):
            product = _product()
        with freeze_time("2026-03-01 09:00:00"):
            product.name = "Wooden Comb"
            product.save()

        product.refresh_from_db()
        assert product.updated_at - product.created_at == timedelta(hours=1)

    def test_update_fields_includes_updated_at(self):
        with freeze_time("2026-03-01 08:00:00"):
            product = _product()
        with freeze_time("2026-03-02 08:00:00"):
            product.stock = 9
            product.save(update_fields=["stock"])

        product.refresh_from_db()
        assert product.stock == 9
        assert product.updated_at.date() > product.created_at.date()

    def test_plain_base_model_hard_deletes(self):
        entry = CartEntry.objects.create(
            user_id="buyer-1", product=_product(), name="Bamboo Comb", price=Decimal("95.00")
        )
        entry.delete()
        assert not CartEntry.objects.filter(id=entry.id).exists()


class TestSoftDeleteModel:
    def test_new_instance_is_not_deleted(self):
        assert not _product().is_deleted

    def test_delete_records_timestamp(self):
        product = _product()
        with freeze_time("2026-05-10 12:00:00"):
            product.delete()
        product.refresh_from_db()
        assert product.deleted_at == datetime(2026, 5, 10, 12, tzinfo=dt_timezone.utc)

    def test_alive_and_dead(self):
        kept = _product("Kept")
        gone = _product("Gone")
        gone.delete()

        assert list(Product.objects.alive()) == [kept]
        assert list(Product.objects.dead()) == [gone]
        assert Product.objects.count() == 2

    def test_hard_delete_removes_row(self):
        product = _product()
        product.hard_delete()
        assert not Product.objects.filter(id=product.id).exists()


class TestSoftDeleteQuerySet:
    def test_bulk_delete_skips_already_deleted(self):
        _product("A")
        _product("B").delete()

        count, detail = Product.objects.all().delete()

        assert count == 1
        assert detail == {"products.Product": 1}
        assert Product.objects.alive().count() == 0

    def test_manager_type(self):
        assert isinstance(Product.objects, SoftDeleteManager)
        assert isinstance(Product.objects.all(), SoftDeleteQuerySet)
