"""Resolve the opaque user identity behind a request.

Every cart, checkout and order record is keyed by this identity rather
than by a local foreign key: users authenticated by the external identity
provider have no row in ``auth_user``.
"""

from __future__ import annotations

from typing import Any, Optional

from modules.core.exceptions import Unauthenticated


def get_identity(user: Any) -> Optional[str]:
    """Return the caller's opaque user id, or ``None`` for anonymous users."""
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    uid = getattr(user, "uid", None)
    if uid:
        return str(uid)
    pk = getattr(user, "pk", None)
    return str(pk) if pk is not None else None


def require_identity(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated("Please log in to continue.")
    return user_id
