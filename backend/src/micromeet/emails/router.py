"""Document email endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter

from ..auth.dependencies import DbSession, TenantContext
from .schemas import DocumentKind, EmailLogResponse, SendEmailRequest, SendEmailResponse
from .service import DeliveryFailed, list_logs, send_document_email

router = APIRouter(prefix="/emails", tags=["Email"])


@router.post("/send", response_model=SendEmailResponse)
def send_email(data: SendEmailRequest, db: DbSession, ctx: TenantContext):
    try:
        email_log = send_document_email(db, ctx, data)
    except DeliveryFailed:
        # Keep the failed log row
        db.commit()
        raise
    db.commit()
    return SendEmailResponse(email_log_id=email_log.id)


@router.get("/logs", response_model=List[EmailLogResponse])
def get_email_logs(
    db: DbSession,
    ctx: TenantContext,
    document_type: Optional[DocumentKind] = None,
    document_id: Optional[UUID] = None,
):
    return list_logs(db, ctx, document_type=document_type, document_id=document_id)
