"""Shared columns for tenant-owned business documents.

Invoices, purchase orders and receipts all carry the same ownership and
lifecycle columns. ``deleted_at`` is the storage form of the lifecycle
state; code outside the models reads it through
``micromeet.documents.lifecycle.lifecycle_of``.
"""

from uuid import uuid4

from sqlalchemy import Column, Date, Text, ForeignKey, Uuid
from sqlalchemy.orm import declared_attr

from .base import PortableJSONB, TZDateTime, utcnow


class DocumentMixin:
    """Ownership, audit timestamps and soft-delete marker."""

    # Column holding the human-readable number ("INV-2025-0001")
    number_attr = "number"
    # Document type key used by the numbering counter
    document_type = ""

    id = Column(Uuid, primary_key=True, default=uuid4)
    date = Column(Date, nullable=False)
    company = Column(PortableJSONB, nullable=False, default=dict)
    notes = Column(Text, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow)
    deleted_at = Column(TZDateTime, nullable=True)

    @declared_attr
    def org_id(cls):
        return Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)

    @declared_attr
    def created_by(cls):
        return Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    @property
    def document_number(self) -> str:
        return getattr(self, self.number_attr)
