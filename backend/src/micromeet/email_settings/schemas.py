"""Pydantic schemas for email settings endpoints"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class EmailSettingsUpsert(BaseModel):
    """SMTP account. smtp_password may be omitted (or sent masked) on update
    to keep the stored password."""
    smtp_host: str = Field(..., min_length=1, max_length=255)
    smtp_port: int = Field(..., ge=1, le=65535)
    smtp_secure: bool = False
    smtp_user: str = Field(..., min_length=1)
    smtp_password: Optional[str] = None
    sender_name: str = Field(..., min_length=1, max_length=200)
    sender_email: EmailStr
    reply_to_email: Optional[EmailStr] = None


class EmailTemplateUpdate(BaseModel):
    email_header_color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    email_footer_text: Optional[str] = None
    include_payment_info: Optional[bool] = None


class EmailReminderUpdate(BaseModel):
    reminder_enabled: bool
    reminder_days_before_due: Optional[int] = Field(None, ge=0, le=90)
    reminder_days_after_due: Optional[int] = Field(None, ge=0, le=90)
    reminder_subject: Optional[str] = None
    reminder_message: Optional[str] = None


class EmailSettingsResponse(BaseModel):
    id: UUID
    smtp_host: str
    smtp_port: int
    smtp_secure: bool
    smtp_user: str
    smtp_password: str
    sender_name: str
    sender_email: str
    reply_to_email: Optional[str]
    email_header_color: Optional[str]
    email_footer_text: Optional[str]
    include_payment_info: bool
    reminder_enabled: bool
    reminder_days_before_due: Optional[int]
    reminder_days_after_due: Optional[int]
    reminder_subject: Optional[str]
    reminder_message: Optional[str]
    test_status: Optional[str]
    last_tested_at: Optional[datetime]
    is_configured: bool = True


class ConnectionTestResponse(BaseModel):
    status: Literal["success", "failed"]
    message: str
