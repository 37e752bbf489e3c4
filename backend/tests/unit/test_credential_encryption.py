"""Unit tests for SMTP credential encryption"""

import json
from uuid import uuid4

import pytest

from micromeet.email_settings.encryption import (
    EncryptedSecret,
    SecretEncryption,
    decrypt_smtp_password,
    encrypt_smtp_password,
)


class TestSmtpPasswordEncryption:

    def test_round_trip(self):
        org_id = uuid4()
        stored = encrypt_smtp_password("app-password-123", org_id)

        assert "app-password-123" not in stored
        assert decrypt_smtp_password(stored, org_id) == "app-password-123"

    def test_fresh_nonce_per_encryption(self):
        org_id = uuid4()
        first = json.loads(encrypt_smtp_password("same", org_id))
        second = json.loads(encrypt_smtp_password("same", org_id))
        assert first["n"] != second["n"]

    def test_bound_to_organization(self):
        stored = encrypt_smtp_password("app-password-123", uuid4())
        with pytest.raises(ValueError):
            decrypt_smtp_password(stored, uuid4())

    def test_context_swap_detected(self):
        org_id = uuid4()
        envelope = json.loads(encrypt_smtp_password("app-password-123", org_id))
        envelope["ctx"] = f"email_settings:{uuid4()}"
        with pytest.raises(ValueError):
            SecretEncryption().decrypt(EncryptedSecret.from_json(json.dumps(envelope)))

    def test_different_pepper_cannot_decrypt(self):
        encrypted = SecretEncryption(pepper="pepper-one").encrypt("secret", context="x")
        with pytest.raises(ValueError):
            SecretEncryption(pepper="pepper-two").decrypt(encrypted)
