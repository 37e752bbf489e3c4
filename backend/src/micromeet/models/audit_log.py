"""Audit trail rows"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, TZDateTime, utcnow


class AuditLog(Base):
    """One recorded action inside an organization.

    Written for logins, password changes, membership and invitation
    handling, and the delete/restore/purge of documents. ``entity_type`` and
    ``entity_id`` point at the row acted on; purged documents keep their
    number in ``metadata_json`` since the row itself is gone. Rows are only
    ever inserted.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_org_id", "org_id"),
        Index("ix_audit_log_org_id_created_at", "org_id", "created_at"),
        Index("ix_audit_log_org_id_entity", "org_id", "entity_type", "entity_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    actor_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Uuid, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)

    actor = relationship("User")

    def __repr__(self):
        return f"<AuditLog(action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
