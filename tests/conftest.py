from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.cart.models import CartEntry
from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and authenticated clients
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    def _make(username: str):
        return User.objects.create_user(username=username, password="testpass123")

    return _make


@pytest.fixture()
def seller(make_user):
    return make_user("seller")


@pytest.fixture()
def buyer(make_user):
    return make_user("buyer")


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as ``user``."""

    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


@pytest.fixture()
def seller_client(client_for, seller):
    return client_for(seller)


@pytest.fixture()
def buyer_client(client_for, buyer):
    return client_for(buyer)


# ---------------------------------------------------------------------------
# Catalog and cart
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_product(seller):
    def _make(name="Bamboo Toothbrush", price="500.00", stock=5, owner=None):
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock=stock,
            owner_id=str((owner or seller).pk),
        )

    return _make


@pytest.fixture()
def make_cart_entry(buyer):
    def _make(product, quantity=1, user=None):
        return CartEntry.objects.create(
            user_id=str((user or buyer).pk),
            product=product,
            name=product.name,
            price=product.price,
            image=product.image,
            quantity=quantity,
        )

    return _make


@pytest.fixture()
def delivery_data():
    return {
        "full_name": "Maria Santos",
        "phone": "09171234567",
        "address": "12 Mabini St., Brgy. San Roque",
        "city": "Quezon City",
        "postal_code": "1100",
        "notes": "Leave at the gate",
    }
