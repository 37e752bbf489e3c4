"""Audit log query endpoints (owner/admin only).

Audit logs are immutable and cannot be created, updated, or deleted through
the API. Results are always scoped to the caller's organization.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import func, select

from ..auth.dependencies import DbSession, TenantContext
from ..models.audit_log import AuditLog
from ..tenancy.policy import Action, Resource, authorize
from .schemas import AuditLogListResponse


router = APIRouter(prefix="/audit", tags=["Audit Logs"])


@router.get("", response_model=AuditLogListResponse, summary="Query audit logs (owner/admin only)")
def query_audit_logs(
    db: DbSession,
    ctx: TenantContext,
    action: Optional[str] = Query(None, description="Filter by action type (e.g., MEMBER_REMOVED)"),
    entity_type: Optional[str] = Query(None, description="Filter by entity type (e.g., invoice)"),
    start_date: Optional[datetime] = Query(None, description="Minimum created_at (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Maximum created_at (ISO 8601)"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query audit logs with filtering and pagination, newest first.

    Example:
        GET /audit?action=MEMBER_REMOVED&page=1&per_page=50
    """
    authorize(Action.VIEW_AUDIT, Resource(org_id=ctx.org_id), ctx)

    stmt = select(AuditLog).where(AuditLog.org_id == ctx.org_id)

    if action:
        stmt = stmt.where(AuditLog.action == action)
    if entity_type:
        stmt = stmt.where(AuditLog.entity_type == entity_type)
    if start_date:
        stmt = stmt.where(AuditLog.created_at >= start_date)
    if end_date:
        stmt = stmt.where(AuditLog.created_at <= end_date)

    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar()

    offset = (page - 1) * per_page
    entries = db.execute(
        stmt.order_by(AuditLog.created_at.desc()).offset(offset).limit(per_page)
    ).scalars().all()

    return AuditLogListResponse(entries=entries, total=total, page=page, per_page=per_page)
