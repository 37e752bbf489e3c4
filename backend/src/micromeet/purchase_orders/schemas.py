"""Pydantic schemas for purchase order endpoints"""

import datetime as dt
from typing import ClassVar, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, Field

from ..documents.schemas import CompanyInfo, DocumentUpdate, LineItemIn, PartyInfo, PricedDocumentResponse

PurchaseOrderStatus = Literal["draft", "sent", "confirmed", "received", "cancelled"]


class PurchaseOrderCreate(BaseModel):
    date: dt.date
    expected_delivery_date: Optional[dt.date] = None
    company: CompanyInfo
    vendor: PartyInfo
    items: List[LineItemIn] = Field(..., min_length=1)
    tax_rate: float = Field(0, ge=0, le=100)
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: PurchaseOrderStatus = "draft"


class PurchaseOrderUpdate(DocumentUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset({
        "date", "company", "vendor", "items", "tax_rate", "status",
    })

    date: Optional[dt.date] = None
    expected_delivery_date: Optional[dt.date] = None
    company: Optional[CompanyInfo] = None
    vendor: Optional[PartyInfo] = None
    items: Optional[List[LineItemIn]] = Field(None, min_length=1)
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: Optional[PurchaseOrderStatus] = None


class PurchaseOrderStatusUpdate(BaseModel):
    status: PurchaseOrderStatus


class PurchaseOrderResponse(PricedDocumentResponse):
    po_number: str
    expected_delivery_date: Optional[dt.date]
    vendor: PartyInfo
    shipping_address: Optional[str]
