"""Credential encryption using AES-256-GCM.

SMTP passwords are stored as a small JSON envelope:
    {"v": 1, "n": <base64 nonce>, "c": <base64 ciphertext>, "ctx": <context>}

- The key is derived from PASSWORD_PEPPER with HKDF under its own info
  string, so it is independent of the password hashing pepper use.
- Each encryption uses a fresh 96-bit nonce.
- The context (``email_settings:{org_id}``) is bound as associated data, so
  a ciphertext copied to another organization's row fails to decrypt.
"""

import base64
import json
import os
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..config import get_settings


@dataclass
class EncryptedSecret:
    version: int
    nonce: str
    ciphertext: str
    context: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps({
            "v": self.version,
            "n": self.nonce,
            "c": self.ciphertext,
            "ctx": self.context
        })

    @classmethod
    def from_json(cls, data: str) -> "EncryptedSecret":
        parsed = json.loads(data)
        return cls(
            version=parsed["v"],
            nonce=parsed["n"],
            ciphertext=parsed["c"],
            context=parsed.get("ctx")
        )


class SecretEncryption:
    """AES-256-GCM encryption for stored credentials.

    Example:
        encryptor = SecretEncryption()
        stored = encryptor.encrypt("smtp-password", context=f"email_settings:{org_id}").to_json()
        ...
        password = encryptor.decrypt(EncryptedSecret.from_json(stored))
    """

    HKDF_INFO = b"micromeet-credential-encryption-v1"

    def __init__(self, pepper: Optional[str] = None):
        self._key = HKDF(
            algorithm=hashes.SHA256(),
            length=32,
            salt=None,
            info=self.HKDF_INFO,
        ).derive((pepper or get_settings().PASSWORD_PEPPER).encode())

    def encrypt(self, secret: str, context: Optional[str] = None) -> EncryptedSecret:
        nonce = os.urandom(12)
        associated_data = context.encode() if context else None
        ciphertext = AESGCM(self._key).encrypt(nonce, secret.encode(), associated_data)

        return EncryptedSecret(
            version=1,
            nonce=base64.b64encode(nonce).decode(),
            ciphertext=base64.b64encode(ciphertext).decode(),
            context=context
        )

    def decrypt(self, encrypted: EncryptedSecret) -> str:
        """Decrypt a stored secret.

        Raises:
            ValueError: If decryption fails (wrong key, tampered data, wrong context)
        """
        if encrypted.version != 1:
            raise ValueError(f"Unsupported encryption version: {encrypted.version}")

        nonce = base64.b64decode(encrypted.nonce)
        ciphertext = base64.b64decode(encrypted.ciphertext)
        associated_data = encrypted.context.encode() if encrypted.context else None

        try:
            plaintext = AESGCM(self._key).decrypt(nonce, ciphertext, associated_data)
        except InvalidTag as e:
            raise ValueError("Decryption failed - invalid key or tampered data") from e

        return plaintext.decode()


def _context(org_id) -> str:
    return f"email_settings:{org_id}"


def encrypt_smtp_password(password: str, org_id) -> str:
    return SecretEncryption().encrypt(password, context=_context(org_id)).to_json()


def decrypt_smtp_password(stored: str, org_id) -> str:
    encrypted = EncryptedSecret.from_json(stored)
    if encrypted.context != _context(org_id):
        raise ValueError("Encrypted credential belongs to a different organization")
    return SecretEncryption().decrypt(encrypted)
