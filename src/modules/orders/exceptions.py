"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The order does not exist or is not visible to the caller."""


class InvalidTransition(Exception):
    """The requested status change is not in the transition table."""


class NotOrderSeller(Exception):
    """The caller owns none of the products in this order."""


class UpdateFailed(Exception):
    """The status write failed in storage; the caller may retry manually."""
