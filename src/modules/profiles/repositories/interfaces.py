"""Profile repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.profiles.models import UserProfile


class IProfileRepository(ABC):
    @abstractmethod
    def get_by_user(self, user_id: str) -> Optional[UserProfile]:
        """The profile of ``user_id``, ``None`` when never saved."""

    @abstractmethod
    def get_or_create(self, user_id: str) -> UserProfile:
        """Existing profile, or a new empty one."""

    @abstractmethod
    def save(self, profile: UserProfile) -> UserProfile:
        """Persist the profile."""
