"""Integration tests for the profile endpoint."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

URL = "/api/v1/profile/"


class TestProfileAPI:
    def test_missing_profile_is_404(self, buyer_client):
        response = buyer_client.get(URL)
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"

    def test_put_then_get(self, buyer_client, buyer):
        response = buyer_client.put(
            URL,
            {
                "first_name": "Maria",
                "last_name": "Santos",
                "contact": "09171234567",
                "street": "Mabini St.",
                "barangay": "San Roque",
                "city": "Marikina",
                "zip_code": "1800",
            },
            format="json",
        )
        assert response.status_code == 200
        assert response.data["user_id"] == str(buyer.pk)

        profile = buyer_client.get(URL).data
        assert profile["full_name"] == "Maria Santos"
        assert profile["city"] == "Marikina"

    def test_bad_contact(self, buyer_client):
        response = buyer_client.put(
            URL,
            {"first_name": "Maria", "last_name": "Santos", "contact": "12345"},
            format="json",
        )

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["attr"] == "contact"
        assert "start with 09" in error["detail"]

    def test_prefills_checkout(self, buyer_client, make_product, make_cart_entry):
        buyer_client.put(
            URL,
            {"first_name": "Maria", "last_name": "Santos", "contact": "09171234567", "city": "Pasig"},
            format="json",
        )
        entry = make_cart_entry(make_product())

        response = buyer_client.post(
            "/api/v1/checkout/", {"selections": [{"entry_id": str(entry.id)}]}, format="json"
        )

        assert response.status_code == 201
        assert response.data["delivery"]["full_name"] == "Maria Santos"
        assert response.data["delivery"]["phone"] == "09171234567"
        assert response.data["delivery"]["city"] == "Pasig"
