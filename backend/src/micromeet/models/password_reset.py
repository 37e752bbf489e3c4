"""PasswordResetToken SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, Text, ForeignKey, Index, Uuid

from .base import Base, TZDateTime, utcnow


class PasswordResetToken(Base):
    """Single-use password reset token. A token is spent once used_at is set."""
    __tablename__ = "password_reset_token"
    __table_args__ = (
        Index("ix_password_reset_token_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    token = Column(Text, nullable=False, unique=True)
    expires_at = Column(TZDateTime, nullable=False)
    used_at = Column(TZDateTime, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
