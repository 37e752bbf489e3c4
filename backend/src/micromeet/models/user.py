"""Account model"""

import re
from uuid import uuid4

from sqlalchemy import Column, Text, CheckConstraint, Uuid
from sqlalchemy.orm import relationship, validates

from .base import Base, TZDateTime, utcnow

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

USER_STATUSES = ("ACTIVE", "DISABLED")


class User(Base):
    """A person who can sign in.

    An account is created before it belongs anywhere: registration leaves
    ``membership`` empty until the user creates an organization or accepts
    an invitation. Which organization and role apply is always read from
    that membership row. ``image_key`` is an object-storage key under the
    ``avatar`` category.
    """
    __tablename__ = "user"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'DISABLED')",
            name="ck_user_status",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=True)
    image_key = Column(Text, nullable=True)
    password_hash = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="ACTIVE")
    last_login_at = Column(TZDateTime, nullable=True)
    created_at = Column(TZDateTime, nullable=False, default=utcnow)
    updated_at = Column(TZDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    membership = relationship("OrganizationMember", back_populates="user", uselist=False)

    @validates("email")
    def normalize_email(self, key, value):
        value = (value or "").strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError(f"Invalid email address: {value!r}")
        return value

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
