"""Unit tests for session tokens, password hashing and password policy

Tests cover:
- Token claims (sub/email only, no org or role)
- Expired and tampered tokens
- Argon2id hashing with pepper
- Password policy rejections
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest
from argon2 import PasswordHasher

from micromeet.auth.jwt import create_access_token, decode_token
from micromeet.auth.password import hash_password, needs_rehash, verify_password
from micromeet.auth.password_policy import check_password_strength, PasswordValidationError, validate_password
from micromeet.config import get_settings


class TestAccessToken:

    def test_claims(self):
        user_id = uuid4()
        payload = decode_token(create_access_token(user_id=user_id, email="budi@example.com"))

        assert payload["sub"] == str(user_id)
        assert payload["email"] == "budi@example.com"
        assert payload["exp"] > payload["iat"]

    def test_token_carries_no_tenant_claims(self):
        payload = decode_token(create_access_token(user_id=uuid4(), email="budi@example.com"))
        assert "org_id" not in payload
        assert "role" not in payload

    def test_expired_token_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "iat": int((now - timedelta(hours=2)).timestamp()),
                "exp": int((now - timedelta(hours=1)).timestamp()),
            },
            get_settings().JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode({"sub": str(uuid4())}, "another-secret", algorithm="HS256")
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("Rahasia#Kuat2024")

        assert hashed.startswith("$argon2id$")
        assert verify_password("Rahasia#Kuat2024", hashed)
        assert not verify_password("salah", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("Rahasia#Kuat2024") != hash_password("Rahasia#Kuat2024")

    def test_empty_inputs(self):
        with pytest.raises(ValueError):
            hash_password("")
        assert not verify_password("", "anything")
        assert not verify_password("x", "not-a-hash")

    def test_weaker_parameters_need_rehash(self):
        weak = PasswordHasher(time_cost=1, memory_cost=8 * 1024, parallelism=1)
        old_hash = weak.hash("Rahasia#Kuat2024" + get_settings().PASSWORD_PEPPER)

        assert verify_password("Rahasia#Kuat2024", old_hash)
        assert needs_rehash(old_hash)
        assert not needs_rehash(hash_password("Rahasia#Kuat2024"))


class TestPasswordPolicy:

    def test_strong_password_passes(self):
        assert validate_password("Kopi-Tubruk-77") == []

    @pytest.mark.parametrize("password", ["short", "password123", "aaaaaaaaa", "rahasia123"])
    def test_weak_passwords(self, password):
        assert validate_password(password)

    def test_rejects_own_name(self):
        errors = validate_password("budisantoso99", user_context=["budi@example.com", "BudiSantoso"])
        assert "Password cannot contain your name or email" in errors

    def test_check_raises_with_errors(self):
        with pytest.raises(PasswordValidationError) as exc_info:
            check_password_strength("123")
        assert exc_info.value.errors
