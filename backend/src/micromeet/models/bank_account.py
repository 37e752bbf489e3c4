"""BankAccount SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, Text, ForeignKey, Index, Uuid

from .base import Base, TZDateTime, utcnow


class BankAccount(Base):
    """Payment destination printed on invoices. At most one default per org."""
    __tablename__ = "bank_account"
    __table_args__ = (
        Index("ix_bank_account_org_id", "org_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    bank_name = Column(Text, nullable=False)
    account_number = Column(Text, nullable=False)
    account_holder = Column(Text, nullable=False)
    branch = Column(Text, nullable=True)
    swift_code = Column(Text, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
