"""Celery tasks for scheduled invoice maintenance.

The daily sweep across all organizations. The on-demand refresh for one
organization runs inline in POST /invoices/mark-overdue.
"""

import logging
from typing import Any, Dict

from celery import shared_task
from sqlalchemy.exc import SQLAlchemyError

from ..database import get_db_session
from ..invoices.overdue import mark_overdue_invoices

logger = logging.getLogger(__name__)


@shared_task(name="invoices.mark_overdue", bind=True)
def mark_overdue_task(self) -> Dict[str, Any]:
    """Flag draft/sent invoices past their due date as overdue.

    Idempotent: a second run on the same day finds nothing to update.
    Rows that fail to update are skipped and logged by the sweep itself.

    Returns:
        Dict with status and the number of invoices updated
    """
    logger.info("Overdue sweep task started")
    try:
        with get_db_session() as db:
            updated = mark_overdue_invoices(db)
    except SQLAlchemyError as e:
        logger.error("Overdue sweep task failed", exc_info=True, extra={"error": str(e)})
        return {"status": "failed", "error": str(e), "updated": 0}

    result = {"status": "success", "updated": updated}
    logger.info("Overdue sweep task completed", extra=result)
    return result

