"""Profile domain exceptions."""

from __future__ import annotations


class ProfileNotFound(Exception):
    """The user has not saved a profile yet."""
