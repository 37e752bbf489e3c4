"""Company settings endpoints"""

from typing import Optional

from fastapi import APIRouter
from sqlalchemy import select

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from ..models.base import utcnow
from ..models.company_settings import CompanySettings
from ..storage.keys import ensure_own_key
from ..tenancy.policy import Action, Resource, authorize
from .schemas import CompanySettingsResponse, CompanySettingsUpsert

router = APIRouter(prefix="/company-settings", tags=["Company Settings"])


def _get(db, org_id) -> Optional[CompanySettings]:
    return db.execute(
        select(CompanySettings).where(CompanySettings.org_id == org_id)
    ).scalar_one_or_none()


@router.get("", response_model=Optional[CompanySettingsResponse])
def get_company_settings(db: DbSession, ctx: OptionalTenantContext):
    if ctx is None:
        return None
    return _get(db, ctx.org_id)


@router.put("", response_model=CompanySettingsResponse)
def upsert_company_settings(data: CompanySettingsUpsert, db: DbSession, ctx: TenantContext):
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    for key in (data.logo_key, data.signature_key, data.stamp_key):
        if key:
            ensure_own_key(ctx, key)

    row = _get(db, ctx.org_id)
    if row is None:
        row = CompanySettings(org_id=ctx.org_id, **data.model_dump())
        db.add(row)
    else:
        for field, value in data.model_dump().items():
            setattr(row, field, value)
        row.updated_at = utcnow()

    db.commit()
    db.refresh(row)
    return row
