"""EmailLog SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, CheckConstraint, Index, Uuid

from .base import Base, TZDateTime, utcnow


class EmailLog(Base):
    """One outbound document email attempt: pending, then sent or failed."""
    __tablename__ = "email_log"
    __table_args__ = (
        CheckConstraint(
            "document_type IN ('invoice', 'purchase_order', 'receipt')",
            name="ck_email_log_document_type",
        ),
        CheckConstraint("status IN ('pending', 'sent', 'failed')", name="ck_email_log_status"),
        Index("ix_email_log_org_id_document", "org_id", "document_type", "document_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    document_type = Column(Text, nullable=False)
    document_id = Column(Uuid, nullable=False)
    recipient_email = Column(Text, nullable=False)
    recipient_name = Column(Text, nullable=True)
    subject = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    error_message = Column(Text, nullable=True)
    sent_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    sent_at = Column(TZDateTime, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
