"""Receipt (kwitansi) SQLAlchemy model"""

from sqlalchemy import Column, Numeric, Text, ForeignKey, CheckConstraint, Index, UniqueConstraint, Uuid

from .base import Base
from .document import DocumentMixin

PAYMENT_METHODS = ("cash", "transfer", "check", "other")


class Receipt(DocumentMixin, Base):
    """Proof of payment received. Receipts have no status workflow."""
    __tablename__ = "receipt"
    __table_args__ = (
        CheckConstraint(
            "payment_method IN ('cash', 'transfer', 'check', 'other')",
            name="ck_receipt_payment_method",
        ),
        UniqueConstraint("org_id", "receipt_number", name="uq_receipt_org_number"),
        Index("ix_receipt_org_id_date", "org_id", "date"),
    )

    number_attr = "receipt_number"
    document_type = "receipt"

    receipt_number = Column(Text, nullable=False)
    customer_id = Column(Uuid, ForeignKey("customer.id", ondelete="SET NULL"), nullable=True)
    received_from = Column(Text, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    amount_in_words = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    payment_for = Column(Text, nullable=False)
