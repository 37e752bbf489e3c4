"""OrganizationMember SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, CheckConstraint, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TZDateTime, utcnow


class OrganizationMember(Base):
    """Links a user to the single organization they currently belong to.

    The unique constraint on user_id makes "one organization per user" a
    schema-level invariant. Accepting an invitation into another organization
    deletes the old row and inserts the new one in the same transaction.
    """
    __tablename__ = "organization_member"
    __table_args__ = (
        CheckConstraint("role IN ('owner', 'admin', 'member')", name="ck_organization_member_role"),
        UniqueConstraint("user_id", name="uq_organization_member_user"),
        Index("ix_organization_member_org_id", "org_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role = Column(Text, nullable=False)
    joined_at = Column(TZDateTime, nullable=False, default=utcnow)

    # Relationships
    org = relationship("Org", back_populates="members")
    user = relationship("User", back_populates="membership")

    def __repr__(self):
        return f"<OrganizationMember(org_id={self.org_id}, user_id={self.user_id}, role='{self.role}')>"
