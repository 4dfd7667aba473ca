"""Profile service layer.

Also the prefill source for checkout: the saved address (or, failing
that, the delivery details of the last successful checkout) seeds the
delivery step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.core.identity import require_identity
from modules.profiles.dtos import DeliveryPrefillDTO
from modules.profiles.exceptions import ProfileNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import DeliveryDetailsDTO
    from modules.profiles.dtos import UpdateProfileDTO
    from modules.profiles.models import UserProfile
    from modules.profiles.repositories.interfaces import IProfileRepository

logger = structlog.get_logger(__name__)

_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "contact",
    "house_no",
    "street",
    "barangay",
    "city",
    "province",
    "zip_code",
)


class ProfileService:
    def __init__(self, repository: IProfileRepository) -> None:
        self._repo = repository

    def get_profile(self, user_id: Optional[str]) -> UserProfile:
        user_id = require_identity(user_id)
        profile = self._repo.get_by_user(user_id)
        if not profile:
            raise ProfileNotFound("Profile not found.")
        return profile

    @transaction.atomic
    def update_profile(self, user_id: Optional[str], dto: UpdateProfileDTO) -> UserProfile:
        """Create or overwrite the caller's profile."""
        user_id = require_identity(user_id)
        profile = self._repo.get_or_create(user_id)
        for field in _PROFILE_FIELDS:
            setattr(profile, field, getattr(dto, field))
        profile = self._repo.save(profile)
        logger.info("profile.updated", user_id=user_id)
        return profile

    def delivery_prefill(self, user_id: str) -> DeliveryPrefillDTO:
        profile = self._repo.get_by_user(user_id)
        if not profile:
            return DeliveryPrefillDTO()

        last = profile.last_delivery or {}
        if profile.has_address:
            address = profile.formatted_address()
            city = profile.city
            postal_code = profile.zip_code
        else:
            address = last.get("address", "")
            city = last.get("city", "")
            postal_code = last.get("postal_code", "")

        return DeliveryPrefillDTO(
            full_name=profile.full_name or last.get("full_name", ""),
            phone=profile.contact or last.get("phone", ""),
            address=address,
            city=city,
            postal_code=postal_code,
        )

    def remember_delivery(self, user_id: str, details: DeliveryDetailsDTO) -> None:
        profile = self._repo.get_or_create(user_id)
        profile.last_delivery = details.model_dump()
        self._repo.save(profile)
        logger.info("profile.delivery_remembered", user_id=user_id)
