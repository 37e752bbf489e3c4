"""PurchaseOrder SQLAlchemy model"""

from sqlalchemy import Column, Date, Numeric, Text, CheckConstraint, Index, UniqueConstraint

from .base import Base, PortableJSONB
from .document import DocumentMixin

PURCHASE_ORDER_STATUSES = ("draft", "sent", "confirmed", "received", "cancelled")


class PurchaseOrder(DocumentMixin, Base):
    """Purchase order sent to a vendor."""
    __tablename__ = "purchase_order"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'sent', 'confirmed', 'received', 'cancelled')",
            name="ck_purchase_order_status",
        ),
        UniqueConstraint("org_id", "po_number", name="uq_purchase_order_org_number"),
        Index("ix_purchase_order_org_id_status", "org_id", "status"),
        Index("ix_purchase_order_org_id_date", "org_id", "date"),
    )

    number_attr = "po_number"
    document_type = "purchase_order"

    po_number = Column(Text, nullable=False)
    expected_delivery_date = Column(Date, nullable=True)
    vendor = Column(PortableJSONB, nullable=False, default=dict)
    items = Column(PortableJSONB, nullable=False, default=list)
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)
    shipping_address = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="draft")
