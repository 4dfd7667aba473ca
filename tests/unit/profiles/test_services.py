"""Unit tests for ProfileService and the profile DTO.

Covers:
- UpdateProfileDTO: required names, contact number format.
- update_profile upsert, get_profile not found.
- delivery_prefill: saved address first, then the last delivery.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from modules.core.exceptions import Unauthenticated
from modules.orders.dtos import DeliveryDetailsDTO
from modules.profiles.dtos import UpdateProfileDTO
from modules.profiles.exceptions import ProfileNotFound
from modules.profiles.models import UserProfile
from modules.profiles.services import ProfileService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda p: p
    return repo


@pytest.fixture()
def service(mock_repo):
    return ProfileService(repository=mock_repo)


# ===========================================================================
# DTO
# ===========================================================================


class TestUpdateProfileDTO:
    def test_valid(self):
        dto = UpdateProfileDTO(first_name=" Maria ", last_name="Santos", contact="09171234567")
        assert dto.first_name == "Maria"

    def test_contact_optional(self):
        assert UpdateProfileDTO(first_name="Maria", last_name="Santos").contact == ""

    @pytest.mark.parametrize("contact", ["08171234567", "0917123456", "+639171234567", "0917-123-4567"])
    def test_bad_contact(self, contact):
        with pytest.raises(ValidationError, match="start with 09 and have 11 digits"):
            UpdateProfileDTO(first_name="Maria", last_name="Santos", contact=contact)

    def test_name_longer_than_column(self):
        with pytest.raises(ValidationError):
            UpdateProfileDTO(first_name="M" * 101, last_name="Santos")

    def test_names_required(self):
        with pytest.raises(ValidationError):
            UpdateProfileDTO(first_name="", last_name="Santos")


# ===========================================================================
# Service
# ===========================================================================


class TestProfileService:
    def test_get_profile_missing(self, service, mock_repo):
        mock_repo.get_by_user.return_value = None
        with pytest.raises(ProfileNotFound):
            service.get_profile("buyer-1")

    def test_get_profile_requires_sign_in(self, service):
        with pytest.raises(Unauthenticated):
            service.get_profile(None)

    def test_update_profile(self, service, mock_repo):
        mock_repo.get_or_create.return_value = UserProfile(user_id="buyer-1")

        profile = service.update_profile(
            "buyer-1",
            UpdateProfileDTO(first_name="Maria", last_name="Santos", city="Pasig", zip_code="1600"),
        )

        assert profile.full_name == "Maria Santos"
        assert profile.city == "Pasig"
        mock_repo.save.assert_called_once()

    def test_prefill_without_profile(self, service, mock_repo):
        mock_repo.get_by_user.return_value = None
        assert service.delivery_prefill("buyer-1").full_name == ""

    def test_prefill_from_saved_address(self, service, mock_repo):
        mock_repo.get_by_user.return_value = UserProfile(
            user_id="buyer-1",
            first_name="Maria",
            last_name="Santos",
            contact="09171234567",
            street="Mabini St.",
            barangay="San Roque",
            city="Marikina",
            zip_code="1800",
            last_delivery={"address": "Old address", "city": "Old city"},
        )

        prefill = service.delivery_prefill("buyer-1")

        assert prefill.address == "Mabini St., Brgy. San Roque, Marikina, 1800"
        assert prefill.city == "Marikina"
        assert prefill.postal_code == "1800"
        assert prefill.phone == "09171234567"

    def test_prefill_falls_back_to_last_delivery(self, service, mock_repo):
        mock_repo.get_by_user.return_value = UserProfile(
            user_id="buyer-1",
            last_delivery={
                "full_name": "Juan dela Cruz",
                "phone": "09998887777",
                "address": "5 Rizal Ave.",
                "city": "Manila",
                "postal_code": "1000",
            },
        )

        prefill = service.delivery_prefill("buyer-1")

        assert prefill.full_name == "Juan dela Cruz"
        assert prefill.address == "5 Rizal Ave."
        assert prefill.postal_code == "1000"

    def test_remember_delivery(self, service, mock_repo):
        profile = UserProfile(user_id="buyer-1")
        mock_repo.get_or_create.return_value = profile

        service.remember_delivery(
            "buyer-1",
            DeliveryDetailsDTO(
                full_name="Juan dela Cruz",
                phone="09998887777",
                address="5 Rizal Ave.",
                city="Manila",
                postal_code="1000",
            ),
        )

        assert profile.last_delivery["postal_code"] == "1000"
        assert profile.last_delivery["notes"] == ""
