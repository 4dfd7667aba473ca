"""Integration tests for standardized pagination."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def product_batch(seller):
    """Create a batch of products for pagination tests."""
    products = [
        Product(
            name=f"Eco Product {idx:03d}",
            description="Batch product",
            price=Decimal("9.99"),
            stock=10,
            owner_id=str(seller.pk),
        )
        for idx in range(1, 121)
    ]
    Product.objects.bulk_create(products)
    return products


class TestPagination:
    def test_default_page_size(self, buyer_client, product_batch):
        response = buyer_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert response.data["count"] == 120
        assert len(response.data["results"]) == 20
        assert response.data["next"] is not None
        assert response.data["previous"] is None

    def test_custom_page_size(self, buyer_client, product_batch):
        response = buyer_client.get("/api/v1/products/?page_size=50")
        assert response.status_code == 200
        assert len(response.data["results"]) == 50

    def test_max_page_size(self, buyer_client, product_batch):
        response = buyer_client.get("/api/v1/products/?page_size=1000")
        assert response.status_code == 200
        assert len(response.data["results"]) == 100
        assert response.data["next"] is not None

    def test_out_of_range_page(self, buyer_client, product_batch):
        response = buyer_client.get("/api/v1/products/?page=99")
        assert response.status_code == 404
        assert response.json()["type"] == "client_error"
