"""EmailSettings SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, Integer, Text, ForeignKey, CheckConstraint, UniqueConstraint, Uuid

from .base import Base, TZDateTime, utcnow


class EmailSettings(Base):
    """Per-organization SMTP account used for outbound document mail.

    smtp_password_encrypted holds an AES-GCM envelope produced by
    micromeet.email_settings.encryption; the plaintext is never stored.
    """
    __tablename__ = "email_settings"
    __table_args__ = (
        UniqueConstraint("org_id", name="uq_email_settings_org"),
        CheckConstraint("test_status IS NULL OR test_status IN ('success', 'failed')", name="ck_email_settings_test_status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    smtp_host = Column(Text, nullable=False)
    smtp_port = Column(Integer, nullable=False)
    smtp_secure = Column(Boolean, nullable=False, default=False)
    smtp_user = Column(Text, nullable=False)
    smtp_password_encrypted = Column(Text, nullable=False)
    sender_name = Column(Text, nullable=False)
    sender_email = Column(Text, nullable=False)
    reply_to_email = Column(Text, nullable=True)

    # Template
    email_header_color = Column(Text, nullable=True)
    email_footer_text = Column(Text, nullable=True)
    include_payment_info = Column(Boolean, nullable=False, default=True)

    # Payment reminders
    reminder_enabled = Column(Boolean, nullable=False, default=False)
    reminder_days_before_due = Column(Integer, nullable=True)
    reminder_days_after_due = Column(Integer, nullable=True)
    reminder_subject = Column(Text, nullable=True)
    reminder_message = Column(Text, nullable=True)

    test_status = Column(Text, nullable=True)
    last_tested_at = Column(TZDateTime, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)
