"""Pydantic schemas for invoice endpoints"""

import datetime as dt
from typing import ClassVar, FrozenSet, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ..documents.schemas import CompanyInfo, DocumentUpdate, LineItemIn, PartyInfo, PricedDocumentResponse

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


class InvoiceCreate(BaseModel):
    """The invoice number is allocated by the server."""
    date: dt.date
    due_date: dt.date
    company: CompanyInfo
    customer_id: Optional[UUID] = None
    customer: PartyInfo
    items: List[LineItemIn] = Field(..., min_length=1)
    tax_rate: float = Field(0, ge=0, le=100)
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: InvoiceStatus = "draft"

    @model_validator(mode="after")
    def due_after_issue(self):
        if self.due_date < self.date:
            raise ValueError("due_date must not be before date")
        return self


class InvoiceUpdate(DocumentUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset({
        "date", "due_date", "company", "customer", "items", "tax_rate", "status",
    })

    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    company: Optional[CompanyInfo] = None
    customer_id: Optional[UUID] = None
    customer: Optional[PartyInfo] = None
    items: Optional[List[LineItemIn]] = Field(None, min_length=1)
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: Optional[InvoiceStatus] = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceResponse(PricedDocumentResponse):
    invoice_number: str
    due_date: dt.date
    customer_id: Optional[UUID]
    customer: PartyInfo


class OverdueSweepResponse(BaseModel):
    updated: int
