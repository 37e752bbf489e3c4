"""Organization (tenant) model"""

from uuid import uuid4

from sqlalchemy import Column, Text, Uuid
from sqlalchemy.orm import validates, relationship

from .base import Base, PortableJSONB, TZDateTime, utcnow

MAX_ORG_NAME_LENGTH = 200


class Org(Base):
    """A tenant.

    Customers, invoices, purchase orders, receipts, counters and every
    settings table carry ``org_id`` pointing here, and every query is
    filtered on it. ``settings_json["document_prefixes"]`` overrides the
    default INV/PO/KWT numbering prefixes.
    """
    __tablename__ = "org"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(Text, nullable=False)
    settings_json = Column(PortableJSONB, nullable=False, default=dict)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    members = relationship("OrganizationMember", back_populates="org", cascade="all, delete-orphan")

    @validates("name")
    def strip_name(self, key, value):
        name = (value or "").strip()
        if not name:
            raise ValueError("Organization name cannot be empty")
        if len(name) > MAX_ORG_NAME_LENGTH:
            raise ValueError(f"Organization name cannot exceed {MAX_ORG_NAME_LENGTH} characters")
        return name

    def document_prefixes(self) -> dict:
        return dict((self.settings_json or {}).get("document_prefixes") or {})

    def __repr__(self):
        return f"<Org(id={self.id}, name='{self.name}')>"
