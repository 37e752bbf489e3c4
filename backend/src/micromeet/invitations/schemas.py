"""Pydantic schemas for invitation endpoints"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class InvitationCreate(BaseModel):
    email: EmailStr
    role: Literal["admin", "member"] = "member"


class InvitationResponse(BaseModel):
    id: UUID
    email: str
    role: str
    invited_by_name: str
    expires_at: datetime


class InvitationVerifyResponse(BaseModel):
    """Public token check. Either error or the invitation details are set."""
    valid: bool
    error: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    organization_name: Optional[str] = None


class InvitationAccept(BaseModel):
    token: str = Field(..., min_length=1)


class InvitationAcceptResponse(BaseModel):
    success: bool = True
    already_member: bool
    organization_id: UUID
