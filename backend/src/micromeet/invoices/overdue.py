"""Overdue sweep.

Invoices in draft or sent whose due date lies before today (UTC) move to
overdue. Soft-deleted invoices are left alone. The sweep runs daily from
Celery beat across all tenants and on demand for a single organization.
Rows that fail to update are logged and skipped; there is no retry.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.base import utcnow
from ..models.invoice import Invoice
from ..observability.metrics import overdue_invoices_marked_total

logger = logging.getLogger(__name__)

SWEEPABLE_STATUSES = ("draft", "sent")


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def mark_overdue_invoices(db: Session, org_id: Optional[UUID] = None, today: Optional[date] = None) -> int:
    """Flag past-due invoices as overdue.

    Args:
        db: Database session (flushed, not committed)
        org_id: Restrict to one organization; None sweeps every tenant
        today: Reference date, defaults to the current UTC date

    Returns:
        int: Number of invoices transitioned
    """
    today = today or today_utc()

    stmt = select(Invoice).where(
        Invoice.status.in_(SWEEPABLE_STATUSES),
        Invoice.due_date < today,
        Invoice.deleted_at.is_(None),
    )
    if org_id is not None:
        stmt = stmt.where(Invoice.org_id == org_id)

    count = 0
    for invoice in db.execute(stmt).scalars().all():
        try:
            with db.begin_nested():
                invoice.status = "overdue"
                invoice.updated_at = utcnow()
            count += 1
        except SQLAlchemyError:
            logger.exception(
                "Failed to mark invoice overdue",
                extra={"org_id": invoice.org_id, "document_id": invoice.id},
            )

    if count:
        overdue_invoices_marked_total.inc(count)
    logger.info("Overdue sweep finished", extra={"org_id": org_id, "updated": count})
    return count
