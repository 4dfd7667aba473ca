"""Bearer-token authentication against the external identity provider.

The identity provider (sign-up, e-mail verification, password reset) is
not part of this service.  It issues RS256 ID tokens; this backend
verifies them with PyJWT against the provider's JWKS, which
``PyJWKClient`` caches in memory for 300 s.

Security decisions
------------------
* **Fail Closed**: any decode / validation error returns 401.
* ``algorithms`` comes from configuration, never from the incoming token.
* Audience **and** issuer are always validated.
* Tokens from other issuers are left to the next backend (SimpleJWT
  tokens for local development and tests).
"""

from __future__ import annotations

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

_jwks_clients: dict[str, PyJWKClient] = {}


def _get_jwks_client(url: str) -> PyJWKClient:
    client = _jwks_clients.get(url)
    if client is None:
        client = PyJWKClient(url, cache_jwk_set=True, lifespan=300)
        _jwks_clients[url] = client
    return client


def identity_provider_enabled() -> bool:
    return bool(settings.IDP_ISSUER and settings.IDP_AUDIENCE and settings.IDP_JWKS_URL)


class IdentityProviderUser:
    """Request user for identity-provider sessions.

    There is no local ``User`` row: ``uid`` (the token subject) is the
    opaque identity stored on products, carts and orders.
    """

    def __init__(self, payload: dict):
        self.payload = payload
        self.uid: str = payload.get("user_id") or payload.get("sub", "")
        self.email: str = payload.get("email", "")
        self.email_verified: bool = bool(payload.get("email_verified", False))

    is_authenticated = True
    is_active = True

    @property
    def pk(self) -> str:
        return self.uid

    def __str__(self) -> str:  # pragma: no cover
        return self.uid


class IdentityProviderAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        """Return ``(IdentityProviderUser, token)`` or ``None``."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)

        if not identity_provider_enabled():
            return None
        if not self._token_has_provider_issuer(token):
            return None

        payload = self._decode_token(token)
        user = IdentityProviderUser(payload)
        if not user.uid:
            raise AuthenticationFailed("Token has no subject.")
        logger.info("idp_authenticated", uid=user.uid)
        return (user, token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'

    @staticmethod
    def _extract_token(header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def _token_has_provider_issuer(token: str) -> bool:
        try:
            payload = pyjwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except PyJWTError:
            return False
        return payload.get("iss") == settings.IDP_ISSUER

    @staticmethod
    def _decode_token(token: str) -> dict:
        try:
            signing_key = _get_jwks_client(settings.IDP_JWKS_URL).get_signing_key_from_jwt(
                token
            )
            payload = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=[settings.IDP_ALGORITHM],
                audience=settings.IDP_AUDIENCE,
                issuer=settings.IDP_ISSUER,
            )
        except PyJWTError as exc:
            logger.warning("idp_token_validation_failed", error=str(exc))
            raise AuthenticationFailed(f"Token validation failed: {exc}") from exc
        return payload
