"""Pydantic schemas shared by the document endpoints"""

import datetime as dt
from typing import ClassVar, FrozenSet, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class LineItemIn(BaseModel):
    """Line item as sent by the client. amount is always recomputed."""
    description: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=0)
    unit_price: float = Field(..., ge=0)


class LineItem(BaseModel):
    description: str
    quantity: float
    unit_price: float
    amount: float


class CompanyInfo(BaseModel):
    """Issuer snapshot copied onto the document at creation time."""
    name: str = Field(..., min_length=1)
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    logo: Optional[str] = None


class PartyInfo(BaseModel):
    """Customer or vendor snapshot."""
    name: str = Field(..., min_length=1)
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None


class DocumentUpdate(BaseModel):
    """Base for PATCH bodies: omitted fields stay as they are.

    Fields listed in ``required_fields`` map to NOT NULL columns, so an
    explicit null for them is rejected instead of clearing the value.
    """
    required_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def no_null_for_required(self):
        cleared = sorted(
            name for name in self.model_fields_set & self.required_fields
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class DocumentResponseBase(BaseModel):
    id: UUID
    org_id: UUID
    created_by: Optional[UUID]
    date: dt.date
    company: CompanyInfo
    notes: Optional[str]
    created_at: dt.datetime
    updated_at: dt.datetime
    deleted_at: Optional[dt.datetime]

    class Config:
        from_attributes = True


class PricedDocumentResponse(DocumentResponseBase):
    items: List[LineItem]
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float
    terms: Optional[str]
    status: str


class NextNumberResponse(BaseModel):
    number: str
    next_sequence: int
    prefix: str
    year: int


class PrefixUpdate(BaseModel):
    prefix: str = Field(..., min_length=1, max_length=10, pattern=r"^[A-Za-z0-9]+$")
