"""
Unit tests for embed tokens and the admin key check.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from training_analytics.core.config import ConfigurationError, settings
from training_analytics.core.security import (
    EMBED_SCOPE,
    EmbedTokenError,
    create_embed_token,
    decode_embed_token,
    verify_admin_key,
)


@pytest.fixture(autouse=True)
def embed_keys(monkeypatch):
    monkeypatch.setattr(settings, "EMBED_SECRET_KEY", "test-signing-key")
    monkeypatch.setattr(settings, "EMBED_ADMIN_KEY", "test-admin-key")


class TestEmbedTokens:
    """Tests for create_embed_token / decode_embed_token."""

    def test_round_trip(self):
        token, _ = create_embed_token("42")

        assert decode_embed_token(token) == "42"

    def test_claims(self):
        token, expire = create_embed_token("42", timedelta(minutes=5))

        claims = jwt.decode(token, "test-signing-key", algorithms=["HS256"])

        assert claims["sub"] == "42"
        assert claims["scope"] == EMBED_SCOPE
        assert claims["exp"] == int(expire.timestamp())

    def test_default_lifetime(self, monkeypatch):
        monkeypatch.setattr(settings, "EMBED_TOKEN_EXPIRE_MINUTES", 30)

        _, expire = create_embed_token("42")

        remaining = expire - datetime.now(timezone.utc)
        assert timedelta(minutes=29) < remaining <= timedelta(minutes=30)

    def test_expired(self):
        token, _ = create_embed_token("42", timedelta(seconds=-30))

        with pytest.raises(EmbedTokenError):
            decode_embed_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "42", "scope": EMBED_SCOPE}, "other-key", algorithm="HS256")

        with pytest.raises(EmbedTokenError):
            decode_embed_token(token)

    def test_wrong_scope(self):
        token = jwt.encode({"sub": "42", "scope": "admin"}, "test-signing-key", algorithm="HS256")

        with pytest.raises(EmbedTokenError):
            decode_embed_token(token)

    def test_missing_subject(self):
        token = jwt.encode({"scope": EMBED_SCOPE}, "test-signing-key", algorithm="HS256")

        with pytest.raises(EmbedTokenError):
            decode_embed_token(token)

    def test_garbage(self):
        with pytest.raises(EmbedTokenError):
            decode_embed_token("not-a-token")

    def test_missing_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "EMBED_SECRET_KEY", None)

        with pytest.raises(ConfigurationError):
            create_embed_token("42")


class TestAdminKey:
    """Tests for verify_admin_key."""

    def test_match(self):
        assert verify_admin_key("test-admin-key")

    @pytest.mark.parametrize("provided", [None, "", "wrong", "test-admin-key "])
    def test_mismatch(self, provided):
        assert not verify_admin_key(provided)

    def test_unset_admin_key_rejects_everything(self, monkeypatch):
        monkeypatch.setattr(settings, "EMBED_ADMIN_KEY", None)

        assert not verify_admin_key("test-admin-key")
