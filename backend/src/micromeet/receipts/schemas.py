"""Pydantic schemas for receipt endpoints"""

import datetime as dt
from typing import ClassVar, FrozenSet, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..documents.schemas import CompanyInfo, DocumentResponseBase, DocumentUpdate

PaymentMethod = Literal["cash", "transfer", "check", "other"]


class ReceiptCreate(BaseModel):
    """amount_in_words is spelled out in Indonesian when omitted."""
    date: dt.date
    company: CompanyInfo
    customer_id: Optional[UUID] = None
    received_from: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    amount_in_words: Optional[str] = None
    payment_method: PaymentMethod
    payment_for: str = Field(..., min_length=1)
    notes: Optional[str] = None


class ReceiptUpdate(DocumentUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset({
        "date", "company", "received_from", "amount", "amount_in_words", "payment_method", "payment_for",
    })

    date: Optional[dt.date] = None
    company: Optional[CompanyInfo] = None
    customer_id: Optional[UUID] = None
    received_from: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    amount_in_words: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_for: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None


class ReceiptResponse(DocumentResponseBase):
    receipt_number: str
    customer_id: Optional[UUID]
    received_from: str
    amount: float
    amount_in_words: str
    payment_method: PaymentMethod
    payment_for: str
