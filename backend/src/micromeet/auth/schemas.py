"""Request and response bodies of the /auth endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=200)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Returned by register and login. ``expires_in`` is in seconds."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600


class UserResponse(BaseModel):
    """Profile fields; never the password hash."""
    id: UUID
    email: str
    name: Optional[str]
    image_key: Optional[str]
    status: str
    last_login_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    """Current user plus the organization they act under.

    organization_id, organization_name and role are null until the user
    creates or joins an organization.
    """
    user: UserResponse
    organization_id: Optional[UUID] = None
    organization_name: Optional[str] = None
    role: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    image_key: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetVerify(BaseModel):
    token: str = Field(..., min_length=1)


class PasswordResetVerifyResponse(BaseModel):
    valid: bool
    error: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class SuccessResponse(BaseModel):
    success: bool = True
