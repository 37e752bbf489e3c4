"""DocumentCounter SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Integer, Text, ForeignKey, CheckConstraint, UniqueConstraint, Uuid

from .base import Base, TZDateTime, utcnow


class DocumentCounter(Base):
    """Per-organization, per-type, per-year sequence for document numbers.

    last_number only ever grows within a key and is never reused. Rows are
    created lazily on first allocation and never deleted.
    """
    __tablename__ = "document_counter"
    __table_args__ = (
        CheckConstraint(
            "type IN ('invoice', 'purchase_order', 'receipt')",
            name="ck_document_counter_type",
        ),
        CheckConstraint("last_number >= 0", name="ck_document_counter_last_number"),
        UniqueConstraint("org_id", "type", "year", name="uq_document_counter_org_type_year"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    prefix = Column(Text, nullable=False)
    last_number = Column(Integer, nullable=False, default=0)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)
