"""Pydantic schemas for bank account endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class BankAccountCreate(BaseModel):
    bank_name: str = Field(..., min_length=1)
    account_number: str = Field(..., min_length=1)
    account_holder: str = Field(..., min_length=1)
    branch: Optional[str] = None
    swift_code: Optional[str] = None
    is_default: bool = False


class BankAccountUpdate(BaseModel):
    bank_name: Optional[str] = Field(None, min_length=1)
    account_number: Optional[str] = Field(None, min_length=1)
    account_holder: Optional[str] = Field(None, min_length=1)
    branch: Optional[str] = None
    swift_code: Optional[str] = None
    is_default: Optional[bool] = None


class BankAccountResponse(BaseModel):
    id: UUID
    bank_name: str
    account_number: str
    account_holder: str
    branch: Optional[str]
    swift_code: Optional[str]
    is_default: bool
    created_at: datetime

    class Config:
        from_attributes = True
