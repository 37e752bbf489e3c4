"""Invoice SQLAlchemy model"""

from sqlalchemy import Column, Date, Numeric, Text, ForeignKey, CheckConstraint, Index, UniqueConstraint, Uuid

from .base import Base, PortableJSONB
from .document import DocumentMixin

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")


class Invoice(DocumentMixin, Base):
    """Sales invoice. Amounts are computed server-side from the line items."""
    __tablename__ = "invoice"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'sent', 'paid', 'overdue', 'cancelled')",
            name="ck_invoice_status",
        ),
        UniqueConstraint("org_id", "invoice_number", name="uq_invoice_org_number"),
        Index("ix_invoice_org_id_status", "org_id", "status"),
        Index("ix_invoice_org_id_date", "org_id", "date"),
        Index("ix_invoice_status_due_date", "status", "due_date"),
    )

    number_attr = "invoice_number"
    document_type = "invoice"

    invoice_number = Column(Text, nullable=False)
    due_date = Column(Date, nullable=False)
    customer_id = Column(Uuid, ForeignKey("customer.id", ondelete="SET NULL"), nullable=True)
    customer = Column(PortableJSONB, nullable=False, default=dict)
    items = Column(PortableJSONB, nullable=False, default=list)
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)
    terms = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="draft")
