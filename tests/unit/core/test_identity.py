"""Unit tests for caller identity resolution and the identity-provider user."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed

from modules.core.authentication import (
    IdentityProviderAuthentication,
    IdentityProviderUser,
    identity_provider_enabled,
)
from modules.core.exceptions import Unauthenticated
from modules.core.identity import get_identity, require_identity

pytestmark = pytest.mark.unit


class TestGetIdentity:
    def test_anonymous(self):
        assert get_identity(AnonymousUser()) is None
        assert get_identity(None) is None

    def test_django_user_uses_pk(self, make_user):
        user = make_user("alice")
        assert get_identity(user) == str(user.pk)

    def test_identity_provider_user_uses_uid(self):
        user = IdentityProviderUser({"sub": "uid-123", "email": "a@example.com"})
        assert get_identity(user) == "uid-123"

    def test_user_id_claim_wins_over_sub(self):
        user = IdentityProviderUser({"user_id": "firebase-uid", "sub": "other"})
        assert user.uid == "firebase-uid"
        assert user.pk == "firebase-uid"

    def test_unauthenticated_object(self):
        assert get_identity(SimpleNamespace(is_authenticated=False, pk=1)) is None


class TestRequireIdentity:
    def test_passes_through(self):
        assert require_identity("u-1") == "u-1"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        with pytest.raises(Unauthenticated, match="log in"):
            require_identity(value)


class TestIdentityProviderAuthentication:
    def test_disabled_without_settings(self, settings):
        settings.IDP_ISSUER = ""
        assert not identity_provider_enabled()

    def test_no_header_defers(self, rf):
        request = rf.get("/")
        assert IdentityProviderAuthentication().authenticate(request) is None

    def test_malformed_header(self, rf):
        request = rf.get("/", HTTP_AUTHORIZATION="Token abc")
        with pytest.raises(AuthenticationFailed):
            IdentityProviderAuthentication().authenticate(request)

    def test_foreign_issuer_defers(self, rf, settings):
        settings.IDP_ISSUER = "https://securetoken.example.com/greeniecart"
        settings.IDP_AUDIENCE = "greeniecart"
        settings.IDP_JWKS_URL = "https://example.com/jwks.json"
        request = rf.get("/", HTTP_AUTHORIZATION="Bearer not-a-jwt")

        assert IdentityProviderAuthentication().authenticate(request) is None
