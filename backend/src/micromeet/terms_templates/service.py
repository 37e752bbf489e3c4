"""Terms template service.

Defaults are tracked per document type. A template of type "both" applies to
invoices and purchase orders alike, so making a template default clears the
default flag on every other template whose type overlaps with it.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models.terms_template import TermsTemplate
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from .schemas import TermsTemplateCreate, TermsTemplateUpdate


def types_overlap(a: str, b: str) -> bool:
    return a == b or a == "both" or b == "both"


def _all(db: Session, org_id: UUID) -> List[TermsTemplate]:
    return list(db.execute(
        select(TermsTemplate)
        .where(TermsTemplate.org_id == org_id)
        .order_by(TermsTemplate.created_at)
    ).scalars().all())


def list_templates(db: Session, ctx: Optional[AuthContext], template_type: Optional[str] = None) -> List[TermsTemplate]:
    """Templates usable for template_type ("both" templates always match)."""
    if ctx is None:
        return []
    templates = _all(db, ctx.org_id)
    if template_type:
        templates = [t for t in templates if t.type in (template_type, "both")]
    return templates


def get_default(db: Session, ctx: Optional[AuthContext], template_type: str) -> Optional[TermsTemplate]:
    for template in list_templates(db, ctx, template_type):
        if template.is_default:
            return template
    return None


def _clear_overlapping_defaults(db: Session, org_id: UUID, template_type: str, keep: Optional[UUID] = None) -> None:
    for template in _all(db, org_id):
        if template.id != keep and template.is_default and types_overlap(template.type, template_type):
            template.is_default = False


def _load(db: Session, ctx: AuthContext, template_id: UUID) -> TermsTemplate:
    template = db.get(TermsTemplate, template_id)
    if template is None:
        raise NotFound("Template tidak ditemukan")
    authorize(Action.MANAGE_ORG, Resource(org_id=template.org_id), ctx)
    return template


def create_template(db: Session, ctx: AuthContext, data: TermsTemplateCreate) -> TermsTemplate:
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)

    if data.is_default:
        _clear_overlapping_defaults(db, ctx.org_id, data.type)
    is_first = not _all(db, ctx.org_id)

    template = TermsTemplate(
        org_id=ctx.org_id,
        name=data.name,
        content=data.content,
        type=data.type,
        is_default=data.is_default or is_first,
    )
    db.add(template)
    db.flush()
    return template


def update_template(db: Session, ctx: AuthContext, template_id: UUID, data: TermsTemplateUpdate) -> TermsTemplate:
    template = _load(db, ctx, template_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("name", "content", "type"):
        if changes.get(field) is not None:
            setattr(template, field, changes[field])

    if changes.get("is_default"):
        _clear_overlapping_defaults(db, ctx.org_id, template.type, keep=template.id)
        template.is_default = True
    elif changes.get("is_default") is False:
        template.is_default = False

    db.flush()
    return template


def set_default(db: Session, ctx: AuthContext, template_id: UUID) -> TermsTemplate:
    template = _load(db, ctx, template_id)
    _clear_overlapping_defaults(db, ctx.org_id, template.type, keep=template.id)
    template.is_default = True
    db.flush()
    return template


def delete_template(db: Session, ctx: AuthContext, template_id: UUID) -> None:
    """Deleting the default promotes the oldest remaining template of an
    overlapping type."""
    template = _load(db, ctx, template_id)
    was_default, template_type = template.is_default, template.type
    db.delete(template)
    db.flush()

    if was_default:
        for candidate in _all(db, ctx.org_id):
            if types_overlap(candidate.type, template_type):
                candidate.is_default = True
                break
        db.flush()
