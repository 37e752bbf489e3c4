"""Pydantic schemas for document email"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

DocumentKind = Literal["invoice", "purchase_order", "receipt"]


class SendEmailRequest(BaseModel):
    document_type: DocumentKind
    document_id: UUID
    to: EmailStr
    to_name: Optional[str] = Field(None, max_length=255)
    subject: str = Field(..., min_length=1, max_length=998)
    html: str = Field(..., min_length=1)
    pdf_base64: Optional[str] = None
    pdf_filename: Optional[str] = Field(None, max_length=255)


class SendEmailResponse(BaseModel):
    success: bool = True
    email_log_id: UUID


class EmailLogResponse(BaseModel):
    id: UUID
    document_type: str
    document_id: UUID
    recipient_email: str
    recipient_name: Optional[str] = None
    subject: str
    status: str
    error_message: Optional[str] = None
    sent_by: Optional[UUID] = None
    sent_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
