"""Invitation SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TZDateTime, utcnow


class Invitation(Base):
    """Pending invitation for an email address to join an organization.

    Status moves pending -> accepted, or pending -> expired (cancelled or
    past expires_at). Resending rotates the token and extends the expiry.
    """
    __tablename__ = "invitation"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'member')", name="ck_invitation_role"),
        CheckConstraint("status IN ('pending', 'accepted', 'expired')", name="ck_invitation_status"),
        Index("ix_invitation_org_id_status", "org_id", "status"),
        Index("ix_invitation_email", "email"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    email = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    token = Column(Text, nullable=False, unique=True)
    status = Column(Text, nullable=False, default="pending")
    invited_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    expires_at = Column(TZDateTime, nullable=False)
    accepted_at = Column(TZDateTime, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)

    org = relationship("Org")
    inviter = relationship("User")
