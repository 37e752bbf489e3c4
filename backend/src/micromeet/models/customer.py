"""Customer SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TZDateTime, utcnow


class Customer(Base):
    """Reusable customer (or vendor) record within an organization.

    Documents copy the customer's contact details into their own snapshot, so
    editing or deleting a customer never rewrites issued documents.
    """
    __tablename__ = "customer"
    __table_args__ = (
        Index("ix_customer_org_id", "org_id"),
        Index("ix_customer_org_id_name", "org_id", "name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    created_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False, default="")
    phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    org = relationship("Org")
