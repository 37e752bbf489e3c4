"""Pydantic schemas for dashboard endpoints"""

import datetime as dt
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_revenue_this_month: float = 0
    pending_invoices: int = 0
    overdue_invoices: int = 0
    paid_invoices: int = 0
    total_invoices: int = 0
    total_purchase_orders: int = 0
    total_receipts: int = 0
    total_invoice_amount: float = 0
    total_paid_amount: float = 0
    total_pending_amount: float = 0


class RevenuePoint(BaseModel):
    month: str
    year: int
    revenue: float
    count: int


class TopCustomer(BaseModel):
    name: str
    total: float
    count: int


class RecentDocument(BaseModel):
    id: UUID
    type: Literal["invoice", "purchase_order", "receipt"]
    number: str
    name: str
    amount: float
    date: dt.date
    status: Optional[str]
    created_at: dt.datetime
