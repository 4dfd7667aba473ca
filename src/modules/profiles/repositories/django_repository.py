"""Django ORM implementation of the Profile repository."""

from __future__ import annotations

from typing import Optional

from modules.profiles.models import UserProfile
from modules.profiles.repositories.interfaces import IProfileRepository


class ProfileDjangoRepository(IProfileRepository):
    def get_by_user(self, user_id: str) -> Optional[UserProfile]:
        return UserProfile.objects.filter(user_id=user_id).first()

    def get_or_create(self, user_id: str) -> UserProfile:
        profile, _ = UserProfile.objects.get_or_create(user_id=user_id)
        return profile

    def save(self, profile: UserProfile) -> UserProfile:
        profile.save()
        return profile
