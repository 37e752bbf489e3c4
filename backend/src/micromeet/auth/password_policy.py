"""Password rules for registration, password change and reset.

Length and blocklist checks in the spirit of NIST SP 800-63B; there are no
composition rules. The blocklist includes common Indonesian choices and the
product's own name.
"""

import re
from typing import Iterable, List, Optional

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

COMMON_PASSWORDS = frozenset({
    "password", "password1", "password123", "passw0rd", "p@ssw0rd",
    "123456", "1234567", "12345678", "1234567890", "123123", "654321",
    "qwerty", "qwertyuiop", "123qwe", "qazwsx", "1qaz2wsx", "asdfgh", "zxcvbnm",
    "abc123", "admin", "admin123", "changeme", "welcome", "welcome1",
    "letmein", "iloveyou", "trustno1", "monkey", "dragon", "master",
    "shadow", "sunshine", "superman", "football", "baseball",
    "rahasia", "rahasia123", "bismillah", "indonesia",
    "invoice", "invoice123", "micromeet",
})

_REPEATED = re.compile(r"^(.)\1+$")
_SEQUENTIAL = re.compile(r"^(012|123|234|345|456|567|678|789|890)+$")
_KEYBOARD_RUN = re.compile(r"^(qwerty|asdf|zxcv|wasd)+")


class PasswordValidationError(Exception):
    def __init__(self, message: str, errors: List[str]):
        self.message = message
        self.errors = errors
        super().__init__(message)


def _mentions(password: str, context: Iterable[Optional[str]]) -> bool:
    for value in context:
        value = (value or "").lower()
        if len(value) >= 3 and (value in password or password in value):
            return True
    return False


def validate_password(password: str, user_context: Optional[List[str]] = None) -> List[str]:
    """Return every rule the password breaks; empty when acceptable.

    ``user_context`` holds the account's email and name, which the password
    must not contain.
    """
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    elif len(password) > MAX_PASSWORD_LENGTH:
        errors.append(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long")

    lowered = password.lower()
    if lowered in COMMON_PASSWORDS:
        errors.append("This password is too common. Please choose a more unique password")
    if any(p.match(lowered) for p in (_REPEATED, _SEQUENTIAL, _KEYBOARD_RUN)):
        errors.append("Password contains a weak pattern (repeated or sequential characters)")
    if user_context and _mentions(lowered, user_context):
        errors.append("Password cannot contain your name or email")
    return errors


def check_password_strength(password: str, user_context: Optional[List[str]] = None) -> None:
    errors = validate_password(password, user_context=user_context)
    if errors:
        raise PasswordValidationError("Password does not meet security requirements", errors)
