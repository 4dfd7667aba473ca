"""Cart domain exceptions."""

from __future__ import annotations


class DuplicateItem(Exception):
    """The product already has an entry in this user's cart."""


class CannotBuyOwnProduct(Exception):
    """Sellers cannot add their own listings to their cart."""


class OutOfStock(Exception):
    """The product has no stock left."""


class CartEntryNotFound(Exception):
    """No cart entry with this id belongs to the caller."""


class RemovalFailed(Exception):
    """The entry could not be looked up or deleted."""
