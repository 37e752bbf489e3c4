"""Dashboard service - tenant-scoped aggregates over active documents.

Soft-deleted documents never count. Revenue is the total of paid invoices,
bucketed by invoice date. Every function returns empty or zero results for
an anonymous caller.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session

from ..invoices.overdue import SWEEPABLE_STATUSES, today_utc
from ..models.invoice import Invoice
from ..models.purchase_order import PurchaseOrder
from ..models.receipt import Receipt
from ..tenancy.context import AuthContext
from .schemas import DashboardStats, RecentDocument, RevenuePoint, TopCustomer

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")

TOP_CUSTOMERS_LIMIT = 5
RECENT_DOCUMENTS_LIMIT = 10
REVENUE_MONTHS = 6


def _month_start(year: int, month: int) -> date:
    return date(year, month, 1)


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return _month_start(index // 12, index % 12 + 1)


def _active(model, ctx: AuthContext):
    return and_(model.org_id == ctx.org_id, model.deleted_at.is_(None))


def _money(value) -> float:
    return float(value or Decimal("0"))


def get_stats(db: Session, ctx: Optional[AuthContext], today: Optional[date] = None) -> DashboardStats:
    if ctx is None:
        return DashboardStats()

    today = today or today_utc()
    month_start = _month_start(today.year, today.month)
    next_month = _add_months(month_start, 1)

    is_paid = Invoice.status == "paid"
    is_pending = Invoice.status.in_(SWEEPABLE_STATUSES)
    is_overdue = or_(
        Invoice.status == "overdue",
        and_(is_pending, Invoice.due_date < today),
    )
    paid_this_month = and_(is_paid, Invoice.date >= month_start, Invoice.date < next_month)

    row = db.execute(
        select(
            func.count(Invoice.id),
            func.sum(case((paid_this_month, Invoice.total), else_=0)),
            func.sum(case((is_pending, 1), else_=0)),
            func.sum(case((is_overdue, 1), else_=0)),
            func.sum(case((is_paid, 1), else_=0)),
            func.sum(case((Invoice.status != "cancelled", Invoice.total), else_=0)),
            func.sum(case((is_paid, Invoice.total), else_=0)),
            func.sum(case((is_pending, Invoice.total), else_=0)),
        ).where(_active(Invoice, ctx))
    ).one()

    total_purchase_orders = db.execute(
        select(func.count(PurchaseOrder.id)).where(_active(PurchaseOrder, ctx))
    ).scalar_one()
    total_receipts = db.execute(
        select(func.count(Receipt.id)).where(_active(Receipt, ctx))
    ).scalar_one()

    return DashboardStats(
        total_invoices=row[0] or 0,
        total_revenue_this_month=_money(row[1]),
        pending_invoices=int(row[2] or 0),
        overdue_invoices=int(row[3] or 0),
        paid_invoices=int(row[4] or 0),
        total_invoice_amount=_money(row[5]),
        total_paid_amount=_money(row[6]),
        total_pending_amount=_money(row[7]),
        total_purchase_orders=total_purchase_orders,
        total_receipts=total_receipts,
    )


def get_revenue_chart(db: Session, ctx: Optional[AuthContext], today: Optional[date] = None) -> List[RevenuePoint]:
    """Paid revenue for the current month and the five before it, oldest first."""
    if ctx is None:
        return []

    today = today or today_utc()
    first_month = _add_months(_month_start(today.year, today.month), -(REVENUE_MONTHS - 1))
    end = _add_months(_month_start(today.year, today.month), 1)

    paid = db.execute(
        select(Invoice.date, Invoice.total).where(
            _active(Invoice, ctx),
            Invoice.status == "paid",
            Invoice.date >= first_month,
            Invoice.date < end,
        )
    ).all()

    buckets: Dict[tuple, List[Decimal]] = {}
    for invoice_date, total in paid:
        buckets.setdefault((invoice_date.year, invoice_date.month), []).append(total or Decimal("0"))

    points = []
    for offset in range(REVENUE_MONTHS):
        month = _add_months(first_month, offset)
        totals = buckets.get((month.year, month.month), [])
        points.append(RevenuePoint(
            month=MONTH_ABBREVIATIONS[month.month - 1],
            year=month.year,
            revenue=_money(sum(totals, Decimal("0"))),
            count=len(totals),
        ))
    return points


def get_top_customers(db: Session, ctx: Optional[AuthContext]) -> List[TopCustomer]:
    """Customers ranked by non-cancelled invoice total, grouped by snapshot name."""
    if ctx is None:
        return []

    rows = db.execute(
        select(Invoice.customer, Invoice.total).where(
            _active(Invoice, ctx),
            Invoice.status != "cancelled",
        )
    ).all()

    totals: Dict[str, TopCustomer] = {}
    for customer, total in rows:
        name = (customer or {}).get("name") or "-"
        entry = totals.setdefault(name, TopCustomer(name=name, total=0, count=0))
        entry.total += _money(total)
        entry.count += 1

    ranked = sorted(totals.values(), key=lambda c: c.total, reverse=True)
    return ranked[:TOP_CUSTOMERS_LIMIT]


def get_recent_documents(db: Session, ctx: Optional[AuthContext]) -> List[RecentDocument]:
    """The newest documents across all three types."""
    if ctx is None:
        return []

    def newest(model):
        return db.execute(
            select(model)
            .where(_active(model, ctx))
            .order_by(model.created_at.desc())
            .limit(RECENT_DOCUMENTS_LIMIT)
        ).scalars().all()

    documents = [
        RecentDocument(
            id=inv.id,
            type="invoice",
            number=inv.invoice_number,
            name=(inv.customer or {}).get("name", ""),
            amount=_money(inv.total),
            date=inv.date,
            status=inv.status,
            created_at=inv.created_at,
        )
        for inv in newest(Invoice)
    ]
    documents += [
        RecentDocument(
            id=po.id,
            type="purchase_order",
            number=po.po_number,
            name=(po.vendor or {}).get("name", ""),
            amount=_money(po.total),
            date=po.date,
            status=po.status,
            created_at=po.created_at,
        )
        for po in newest(PurchaseOrder)
    ]
    documents += [
        RecentDocument(
            id=r.id,
            type="receipt",
            number=r.receipt_number,
            name=r.received_from,
            amount=_money(r.amount),
            date=r.date,
            status=None,
            created_at=r.created_at,
        )
        for r in newest(Receipt)
    ]

    documents.sort(key=lambda d: d.created_at, reverse=True)
    return documents[:RECENT_DOCUMENTS_LIMIT]
