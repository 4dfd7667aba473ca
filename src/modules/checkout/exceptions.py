"""Checkout domain exceptions.

Raised by ``CheckoutService`` and translated into HTTP responses by the
views.  ``ValidationFailed`` carries one ``{"attr", "detail"}`` entry per
invalid field.
"""

from __future__ import annotations

from typing import List, Optional


class EmptySelection(Exception):
    """Checkout was started with no cart entries selected."""


class ValidationFailed(Exception):
    def __init__(self, message: str, errors: Optional[List[dict]] = None) -> None:
        super().__init__(message)
        self.errors = errors or [{"attr": None, "detail": message}]


class CheckoutNotFound(Exception):
    """No open checkout with this id for the caller."""


class InvalidCheckoutStep(Exception):
    """The requested move is not allowed from the current step."""


class ProductUnavailable(Exception):
    """A selected product no longer exists."""


class InsufficientStock(Exception):
    """A selected product has less stock than the requested quantity."""


class CheckoutFailed(Exception):
    """Submission failed for a reason the buyer cannot fix."""
