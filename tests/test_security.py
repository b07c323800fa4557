"""
Tests for password hashing and JWT access tokens.
"""

from datetime import timedelta

import pytest
from jose import jwt

from salesflow.core.config import Settings
from salesflow.core.security import (
    PasswordError,
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("manager123")

        assert hashed != "manager123"
        assert verify_password("manager123", hashed)
        assert not verify_password("manager124", hashed)

    def test_hashes_are_salted(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_empty_password(self) -> None:
        with pytest.raises(PasswordError):
            hash_password("")
        assert not verify_password("", hash_password("x1"))

    def test_unrecognized_hash(self) -> None:
        assert not verify_password("secret", "not-a-hash")


class TestAccessTokens:
    def test_round_trip_claims(self, settings: Settings) -> None:
        token = create_access_token("3", settings, extra_claims={"role": "Manager"})
        payload = decode_access_token(token, settings)

        assert payload["sub"] == "3"
        assert payload["role"] == "Manager"
        assert payload["type"] == "access"

    def test_expired_token(self, settings: Settings) -> None:
        token = create_access_token("3", settings, expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenError) as exc_info:
            decode_access_token(token, settings)
        assert exc_info.value.code == "TOKEN_EXPIRED"

    def test_wrong_signing_key(self, settings: Settings) -> None:
        token = create_access_token("3", settings)
        other = settings.model_copy(update={"secret_key": "another-secret-key-of-enough-length"})

        with pytest.raises(TokenError):
            decode_access_token(token, other)

    def test_wrong_token_type(self, settings: Settings) -> None:
        token = jwt.encode({"sub": "3", "type": "refresh"}, settings.secret_key, algorithm="HS256")

        with pytest.raises(TokenError) as exc_info:
            decode_access_token(token, settings)
        assert exc_info.value.code == "TOKEN_TYPE"

    def test_empty_token(self, settings: Settings) -> None:
        with pytest.raises(TokenError):
            decode_access_token("", settings)
