"""Password reset tokens.

Requesting a reset never reveals whether the email exists. Each request
invalidates the user's earlier tokens, issues a fresh single-use token and
mails a link through the system SMTP relay (SMTP_* settings).
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from email.utils import parseaddr
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..config import get_settings
from ..errors import InvalidInput
from ..mail.smtp import SmtpConfig
from ..mail.templates import PASSWORD_RESET_SUBJECT, password_reset_html
from ..models.base import utcnow
from ..models.password_reset import PasswordResetToken
from ..models.user import User
from .password import hash_password
from .password_policy import PasswordValidationError, check_password_strength

logger = logging.getLogger(__name__)

TOKEN_BYTES = 48  # 64 url-safe characters
INVALID_TOKEN_MESSAGE = "Token tidak valid atau sudah kedaluwarsa"


@dataclass
class ResetEmail:
    config: SmtpConfig
    to_email: str
    to_name: str
    html: str
    subject: str = PASSWORD_RESET_SUBJECT


def system_smtp_config() -> Optional[SmtpConfig]:
    """Relay for system mail, or None when SMTP_HOST is unset."""
    settings = get_settings()
    if not settings.SMTP_HOST:
        return None

    sender_name, sender_email = parseaddr(settings.SMTP_SENDER)
    return SmtpConfig(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        secure=settings.SMTP_SECURE,
        user=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        sender_name=sender_name or "Micromeet Invoices",
        sender_email=sender_email,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )


def request_reset(db: Session, email: str) -> Optional[ResetEmail]:
    """Issue a reset token for email.

    Returns:
        The email to send, or None when there is nothing to send (unknown
        address or no system relay). Callers respond identically either way.
    """
    user = db.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar_one_or_none()
    if user is None or not user.is_active:
        return None

    now = utcnow()
    db.execute(
        update(PasswordResetToken)
        .where(PasswordResetToken.user_id == user.id, PasswordResetToken.used_at.is_(None))
        .values(used_at=now)
    )

    settings = get_settings()
    token = PasswordResetToken(
        user_id=user.id,
        token=secrets.token_urlsafe(TOKEN_BYTES),
        expires_at=now + timedelta(minutes=settings.PASSWORD_RESET_EXPIRY_MINUTES),
    )
    db.add(token)
    db.flush()

    config = system_smtp_config()
    if config is None:
        return None

    user_name = user.name or "User"
    return ResetEmail(
        config=config,
        to_email=user.email,
        to_name=user_name,
        html=password_reset_html(
            user_name=user_name,
            reset_url=f"{settings.SITE_URL}?resetToken={token.token}",
            expiry_minutes=settings.PASSWORD_RESET_EXPIRY_MINUTES,
        ),
    )


def _find(db: Session, token: str) -> Optional[PasswordResetToken]:
    return db.execute(
        select(PasswordResetToken).where(PasswordResetToken.token == token)
    ).scalar_one_or_none()


def verify_reset_token(db: Session, token: str) -> Optional[str]:
    """Returns None if the token is usable, else the reason it is not."""
    reset_token = _find(db, token)
    if reset_token is None:
        return "Token tidak valid"
    if reset_token.used_at is not None:
        return "Token sudah digunakan"
    if reset_token.expires_at < utcnow():
        return "Token sudah kedaluwarsa"
    return None


def confirm_reset(db: Session, token: str, new_password: str) -> User:
    """Spend the token and set the new password.

    Raises:
        InvalidInput: Token unusable, or the password fails the policy
    """
    reset_token = _find(db, token)
    if reset_token is None or reset_token.used_at is not None or reset_token.expires_at < utcnow():
        raise InvalidInput(INVALID_TOKEN_MESSAGE)

    user = db.get(User, reset_token.user_id)
    if user is None:
        raise InvalidInput(INVALID_TOKEN_MESSAGE)

    try:
        check_password_strength(new_password, user_context=[user.email, user.name])
    except PasswordValidationError as e:
        raise InvalidInput(e.message, details={"errors": e.errors})

    reset_token.used_at = utcnow()
    user.password_hash = hash_password(new_password)
    user.updated_at = utcnow()
    db.flush()
    logger.info("Password reset completed", extra={"user_id": user.id})
    return user
