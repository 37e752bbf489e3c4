"""Terms template endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from . import service
from .schemas import TemplateType, TermsTemplateCreate, TermsTemplateResponse, TermsTemplateUpdate

router = APIRouter(prefix="/terms-templates", tags=["Terms Templates"])


@router.get("", response_model=List[TermsTemplateResponse])
def list_terms_templates(db: DbSession, ctx: OptionalTenantContext, type: Optional[TemplateType] = None):
    return service.list_templates(db, ctx, type)


@router.get("/default", response_model=Optional[TermsTemplateResponse])
def get_default_terms_template(type: TemplateType, db: DbSession, ctx: OptionalTenantContext):
    return service.get_default(db, ctx, type)


@router.post("", response_model=TermsTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_terms_template(data: TermsTemplateCreate, db: DbSession, ctx: TenantContext):
    template = service.create_template(db, ctx, data)
    db.commit()
    db.refresh(template)
    return template


@router.patch("/{template_id}", response_model=TermsTemplateResponse)
def update_terms_template(template_id: UUID, data: TermsTemplateUpdate, db: DbSession, ctx: TenantContext):
    template = service.update_template(db, ctx, template_id, data)
    db.commit()
    db.refresh(template)
    return template


@router.post("/{template_id}/default", response_model=TermsTemplateResponse)
def set_default_terms_template(template_id: UUID, db: DbSession, ctx: TenantContext):
    template = service.set_default(db, ctx, template_id)
    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_terms_template(template_id: UUID, db: DbSession, ctx: TenantContext):
    service.delete_template(db, ctx, template_id)
    db.commit()
