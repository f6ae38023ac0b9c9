from __future__ import annotations

from datetime import timedelta

import pytest

from timeless.auth.jwt import ACCESS, REFRESH, create_token_pair, decode_jwt, decode_token_of_use, encode_jwt
from timeless.auth.rbac import has_scopes, require_scopes
from timeless.core.exceptions import AuthenticationError, AuthorizationError
from timeless.core.security import hash_password, verify_password


def test_jwt_roundtrip_contains_required_claims():
    tokens = create_token_pair(user_id="u-1", role="artist", secret="test-secret")
    claims = decode_jwt(tokens.access_token, secret="test-secret")
    assert claims["sub"] == "u-1"
    assert claims["role"] == "ARTIST"
    assert claims["token_use"] == ACCESS
    assert "exp" in claims
    assert "iat" in claims
    assert "jti" in claims


def test_refresh_token_is_not_an_access_token():
    tokens = create_token_pair(user_id="u-1", role="EXEC", secret="test-secret")
    assert decode_token_of_use(tokens.refresh_token, "test-secret", REFRESH)["sub"] == "u-1"
    with pytest.raises(AuthenticationError):
        decode_token_of_use(tokens.refresh_token, "test-secret", ACCESS)


def test_jwt_rejects_tampered_and_expired_tokens():
    tokens = create_token_pair(user_id="u-1", role="EXEC", secret="test-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt(tokens.access_token, secret="other-secret")
    with pytest.raises(AuthenticationError):
        decode_jwt("not-a-token", secret="test-secret")

    expired = encode_jwt({"sub": "u-1"}, "test-secret", timedelta(seconds=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        decode_jwt(expired, secret="test-secret")


def test_rbac_blocks_missing_scope():
    require_scopes("ARTIST", ["deals.negotiate", "chat.send"])
    with pytest.raises(AuthorizationError):
        require_scopes("ARTIST", ["deals.create"])
    with pytest.raises(AuthorizationError):
        require_scopes("EXEC", ["deals.admin"])


def test_admin_wildcard_and_unknown_roles():
    assert has_scopes("admin", ["deals.admin", "deals.read"])
    assert has_scopes("REP", ["deals.create"])
    assert not has_scopes("PRODUCER", ["deals.read"])


def test_password_hash_verifies_only_the_right_password():
    stored = hash_password("correct horse", iterations=1000)
    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse", stored)
    assert not verify_password("wrong horse", stored)
    assert not verify_password("correct horse", "garbage")
