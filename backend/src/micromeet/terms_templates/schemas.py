"""Pydantic schemas for terms template endpoints"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

TemplateType = Literal["invoice", "purchase_order", "both"]


class TermsTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    type: TemplateType
    is_default: bool = False


class TermsTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[TemplateType] = None
    is_default: Optional[bool] = None


class TermsTemplateResponse(BaseModel):
    id: UUID
    name: str
    content: str
    type: TemplateType
    is_default: bool
    created_at: datetime

    class Config:
        from_attributes = True
