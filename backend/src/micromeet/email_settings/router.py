"""Email settings endpoints"""

from typing import Optional

from fastapi import APIRouter, Request, status

from ..audit.service import log_from_request
from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from . import service
from .schemas import (
    ConnectionTestResponse,
    EmailReminderUpdate,
    EmailSettingsResponse,
    EmailSettingsUpsert,
    EmailTemplateUpdate,
)

router = APIRouter(prefix="/email-settings", tags=["Email Settings"])


@router.get("", response_model=Optional[EmailSettingsResponse])
def get_email_settings(db: DbSession, ctx: OptionalTenantContext):
    """Current SMTP settings with the password masked, or null when not configured."""
    if ctx is None:
        return None
    row = service.get_for_org(db, ctx.org_id)
    return service.to_response(row) if row else None


@router.put("", response_model=EmailSettingsResponse)
def upsert_email_settings(data: EmailSettingsUpsert, request: Request, db: DbSession, ctx: TenantContext):
    row = service.upsert(db, ctx, data)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="EMAIL_SETTINGS_UPDATED",
        actor_id=ctx.user_id,
        entity_type="email_settings",
        entity_id=row.id,
        metadata={"smtp_host": data.smtp_host, "password_changed": bool(data.smtp_password and data.smtp_password != service.MASKED_PASSWORD)},
    )
    db.commit()
    db.refresh(row)
    return service.to_response(row)


@router.patch("/template", response_model=EmailSettingsResponse)
def update_email_template(data: EmailTemplateUpdate, db: DbSession, ctx: TenantContext):
    row = service.update_template(db, ctx, data)
    db.commit()
    db.refresh(row)
    return service.to_response(row)


@router.patch("/reminder", response_model=EmailSettingsResponse)
def update_email_reminder(data: EmailReminderUpdate, db: DbSession, ctx: TenantContext):
    row = service.update_reminder(db, ctx, data)
    db.commit()
    db.refresh(row)
    return service.to_response(row)


@router.post("/test", response_model=ConnectionTestResponse)
def test_email_connection(db: DbSession, ctx: TenantContext):
    """Log in to the configured SMTP server and record success or failure."""
    result = service.test_connection(db, ctx)
    db.commit()
    return result


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_email_settings(db: DbSession, ctx: TenantContext):
    service.remove(db, ctx)
    db.commit()
