"""Signed session tokens (HS256).

A token says who the caller is: ``sub`` (user id), ``email`` for display,
``iat`` and ``exp``. It never carries an organization or role; those are
read from the membership table on every request so that removals and role
changes apply immediately. There are no refresh tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import UUID

import jwt

from ..config import get_settings

ALGORITHM = "HS256"


def _secret() -> str:
    secret = get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET is not set")
    return secret


def get_jwt_expiry_minutes() -> int:
    return get_settings().JWT_EXPIRY_MINUTES


def create_access_token(user_id: UUID, email: str) -> str:
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(minutes=get_jwt_expiry_minutes())).timestamp()),
    }
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry.

    Raises:
        jwt.ExpiredSignatureError: Token past ``exp``
        jwt.InvalidTokenError: Bad signature or malformed token
    """
    return jwt.decode(token, _secret(), algorithms=[ALGORITHM], options={"require": ["sub", "exp"]})
