"""Cross-module exceptions."""

from __future__ import annotations


class Unauthenticated(Exception):
    """The operation needs a signed-in user and the session has none."""
