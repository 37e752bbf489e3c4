"""Pydantic schemas for member endpoints"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class MemberResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    email: str
    image_key: Optional[str]
    role: str
    joined_at: datetime
    is_current_user: bool


class MemberRoleUpdate(BaseModel):
    """The owner role can neither be granted nor taken away."""
    role: Literal["admin", "member"]
