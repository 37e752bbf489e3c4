"""Argon2id password hashing.

The server-side PASSWORD_PEPPER is appended to every password before it is
hashed or verified; it lives only in configuration. Hashes use the OWASP
recommended Argon2id cost (64 MB memory, 3 passes, 4 lanes). Hashes made
with older parameters still verify and are upgraded on the next login.
"""

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from ..config import get_settings

_hasher = PasswordHasher(
    time_cost=3,
    memory_cost=64 * 1024,
    parallelism=4,
    hash_len=32,
    salt_len=16,
    type=Type.ID,
)


def _peppered(password: str) -> str:
    pepper = get_settings().PASSWORD_PEPPER
    if not pepper:
        raise ValueError("PASSWORD_PEPPER is not set")
    return password + pepper


def hash_password(password: str) -> str:
    """Return an encoded ``$argon2id$...`` hash for password.

    Raises:
        ValueError: Empty password, or PASSWORD_PEPPER missing
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return _hasher.hash(_peppered(password))


def verify_password(password: str, password_hash: str) -> bool:
    """True if password matches. Malformed hashes count as a mismatch."""
    if not password or not password_hash:
        return False
    try:
        return _hasher.verify(password_hash, _peppered(password))
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    try:
        return _hasher.check_needs_rehash(password_hash)
    except InvalidHashError:
        return True
