"""Tests for password hashing and tokens."""
from datetime import timedelta

import pytest
from jose import JWTError

from app.core.security import create_access_token, decode_access_token, hash_password, verify_password


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password_different_outputs(self):
        """Hashing the same password twice gives different salts."""
        assert hash_password("dame1234") != hash_password("dame1234")

    def test_verify_password_correct(self):
        hashed = hash_password("MySecurePassword123")
        assert verify_password("MySecurePassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("MySecurePassword123")
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_empty_hash(self):
        """Members created without a password can never log in."""
        assert verify_password("anything", "") is False


class TestAccessToken:
    def test_round_trip_claims(self):
        token = create_access_token({"sub": "64b000000000000000000002", "role": "member", "user_id": "rahul"})
        payload = decode_access_token(token)

        assert payload["sub"] == "64b000000000000000000002"
        assert payload["role"] == "member"
        assert payload["user_id"] == "rahul"
        assert payload["exp"] > payload["iat"]

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "x", "role": "admin"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token({"sub": "x", "role": "admin"})
        with pytest.raises(JWTError):
            decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
