"""Email settings service.

The stored SMTP password never leaves the service in clear text except to
build an SmtpConfig for delivery. API responses carry MASKED_PASSWORD.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import get_settings
from ..errors import InvalidInput, NotFound
from ..mail.smtp import SmtpConfig, SmtpSendError, verify_connection
from ..models.email_settings import EmailSettings
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from .encryption import decrypt_smtp_password, encrypt_smtp_password
from .schemas import (
    ConnectionTestResponse,
    EmailReminderUpdate,
    EmailSettingsResponse,
    EmailSettingsUpsert,
    EmailTemplateUpdate,
)

logger = logging.getLogger(__name__)

MASKED_PASSWORD = "********"
NOT_CONFIGURED_MESSAGE = "Email belum dikonfigurasi. Silakan atur SMTP di Pengaturan."


def get_for_org(db: Session, org_id: UUID) -> Optional[EmailSettings]:
    return db.execute(
        select(EmailSettings).where(EmailSettings.org_id == org_id)
    ).scalar_one_or_none()


def _require_for_org(db: Session, org_id: UUID) -> EmailSettings:
    row = get_for_org(db, org_id)
    if row is None:
        raise NotFound(NOT_CONFIGURED_MESSAGE)
    return row


def to_response(row: EmailSettings) -> EmailSettingsResponse:
    return EmailSettingsResponse(
        id=row.id,
        smtp_host=row.smtp_host,
        smtp_port=row.smtp_port,
        smtp_secure=row.smtp_secure,
        smtp_user=row.smtp_user,
        smtp_password=MASKED_PASSWORD,
        sender_name=row.sender_name,
        sender_email=row.sender_email,
        reply_to_email=row.reply_to_email,
        email_header_color=row.email_header_color,
        email_footer_text=row.email_footer_text,
        include_payment_info=row.include_payment_info,
        reminder_enabled=row.reminder_enabled,
        reminder_days_before_due=row.reminder_days_before_due,
        reminder_days_after_due=row.reminder_days_after_due,
        reminder_subject=row.reminder_subject,
        reminder_message=row.reminder_message,
        test_status=row.test_status,
        last_tested_at=row.last_tested_at,
    )


def load_smtp_config(db: Session, org_id: UUID) -> Optional[SmtpConfig]:
    """Build the delivery config for an organization, or None if unconfigured."""
    row = get_for_org(db, org_id)
    if row is None:
        return None

    return SmtpConfig(
        host=row.smtp_host,
        port=row.smtp_port,
        secure=row.smtp_secure,
        user=row.smtp_user,
        password=decrypt_smtp_password(row.smtp_password_encrypted, org_id),
        sender_name=row.sender_name,
        sender_email=row.sender_email,
        reply_to=row.reply_to_email,
        timeout=get_settings().SMTP_TIMEOUT_SECONDS,
    )


def upsert(db: Session, ctx: AuthContext, data: EmailSettingsUpsert) -> EmailSettings:
    """Create or update the organization's SMTP account (owner/admin).

    Raises:
        Forbidden: Caller is a plain member
        InvalidInput: Creating settings without a password
    """
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)

    new_password = data.smtp_password if data.smtp_password and data.smtp_password != MASKED_PASSWORD else None
    row = get_for_org(db, ctx.org_id)

    if row is None:
        if new_password is None:
            raise InvalidInput("Password SMTP wajib diisi")
        row = EmailSettings(org_id=ctx.org_id)
        db.add(row)

    row.smtp_host = data.smtp_host
    row.smtp_port = data.smtp_port
    row.smtp_secure = data.smtp_secure
    row.smtp_user = data.smtp_user
    row.sender_name = data.sender_name
    row.sender_email = data.sender_email
    row.reply_to_email = data.reply_to_email
    if new_password is not None:
        row.smtp_password_encrypted = encrypt_smtp_password(new_password, ctx.org_id)
        # Stored test result no longer describes these credentials
        row.test_status = None
        row.last_tested_at = None

    db.flush()
    logger.info("Email settings saved", extra={"org_id": ctx.org_id, "user_id": ctx.user_id})
    return row


def update_template(db: Session, ctx: AuthContext, data: EmailTemplateUpdate) -> EmailSettings:
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    row = _require_for_org(db, ctx.org_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(row, field, value)

    db.flush()
    return row


def update_reminder(db: Session, ctx: AuthContext, data: EmailReminderUpdate) -> EmailSettings:
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    row = _require_for_org(db, ctx.org_id)

    for field, value in data.model_dump().items():
        setattr(row, field, value)

    db.flush()
    return row


def remove(db: Session, ctx: AuthContext) -> None:
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    row = _require_for_org(db, ctx.org_id)
    db.delete(row)
    db.flush()


def test_connection(db: Session, ctx: AuthContext) -> ConnectionTestResponse:
    """Connect and log in with the stored credentials and record the outcome."""
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    row = _require_for_org(db, ctx.org_id)
    config = load_smtp_config(db, ctx.org_id)

    try:
        verify_connection(config)
        result = ConnectionTestResponse(status="success", message="Koneksi SMTP berhasil")
    except SmtpSendError as e:
        logger.warning("SMTP connection test failed", extra={"org_id": ctx.org_id})
        result = ConnectionTestResponse(status="failed", message=f"Koneksi SMTP gagal: {e}")

    row.test_status = result.status
    row.last_tested_at = datetime.now(timezone.utc)
    db.flush()
    return result
