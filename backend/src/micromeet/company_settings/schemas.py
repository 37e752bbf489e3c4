"""Pydantic schemas for company settings endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CompanySettingsUpsert(BaseModel):
    """Full replacement of the organization's letterhead.

    *_key fields are storage keys returned by POST /files/upload-url.
    """
    name: str = Field(..., min_length=1, max_length=200)
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    logo_key: Optional[str] = None
    signature_key: Optional[str] = None
    stamp_key: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    bank_account_name: Optional[str] = None


class CompanySettingsResponse(CompanySettingsUpsert):
    id: UUID
    org_id: UUID
    updated_at: datetime

    class Config:
        from_attributes = True
