"""TermsTemplate SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, Text, ForeignKey, CheckConstraint, Index, Uuid

from .base import Base, TZDateTime, utcnow


class TermsTemplate(Base):
    """Reusable terms and conditions text for invoices and purchase orders."""
    __tablename__ = "terms_template"
    __table_args__ = (
        CheckConstraint("type IN ('invoice', 'purchase_order', 'both')", name="ck_terms_template_type"),
        Index("ix_terms_template_org_id", "org_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
