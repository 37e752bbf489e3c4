"""CompanySettings SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, UniqueConstraint, Uuid

from .base import Base, TZDateTime, utcnow


class CompanySettings(Base):
    """Letterhead details used to prefill documents. One row per organization."""
    __tablename__ = "company_settings"
    __table_args__ = (
        UniqueConstraint("org_id", name="uq_company_settings_org"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    tax_id = Column(Text, nullable=True)
    logo_key = Column(Text, nullable=True)
    signature_key = Column(Text, nullable=True)
    stamp_key = Column(Text, nullable=True)
    bank_name = Column(Text, nullable=True)
    bank_account = Column(Text, nullable=True)
    bank_account_name = Column(Text, nullable=True)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)
