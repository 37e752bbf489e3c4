"""Document number endpoints"""

from fastapi import APIRouter, Request

from ..audit.service import log_from_request
from ..auth.dependencies import DbSession, TenantContext
from ..documents.numbering import DocumentType, peek_next, set_prefix
from ..documents.schemas import NextNumberResponse, PrefixUpdate
from ..tenancy.policy import Action, Resource, authorize

router = APIRouter(prefix="/document-numbers", tags=["Document Numbers"])


@router.get("/{document_type}/next", response_model=NextNumberResponse)
def get_next_number(document_type: DocumentType, db: DbSession, ctx: TenantContext):
    """Preview the number the next created document will receive.

    Read-only; a concurrent create may take this number first.
    """
    return peek_next(db, ctx.org_id, document_type)


@router.put("/{document_type}/prefix", response_model=NextNumberResponse)
def update_prefix(document_type: DocumentType, data: PrefixUpdate, request: Request, db: DbSession, ctx: TenantContext):
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)
    prefix = data.prefix.upper()
    preview = set_prefix(db, ctx.org_id, document_type, prefix)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="DOCUMENT_PREFIX_CHANGED",
        actor_id=ctx.user_id,
        entity_type="document_counter",
        metadata={"document_type": document_type.value, "prefix": prefix},
    )
    db.commit()
    return preview
