"""Document email service.

A send attempt is recorded in email_log before the SMTP call and updated to
sent or failed afterwards, so the log survives a failed delivery.
"""

import base64
import binascii
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..documents.service import DocumentService
from ..email_settings.service import NOT_CONFIGURED_MESSAGE, load_smtp_config
from ..errors import ExternalServiceFailure, InvalidInput
from ..mail.smtp import Attachment, SmtpSendError, build_message, send_message
from ..models.base import utcnow
from ..models.email_log import EmailLog
from ..models.invoice import Invoice
from ..models.purchase_order import PurchaseOrder
from ..models.receipt import Receipt
from ..observability.metrics import emails_sent_total
from ..tenancy.context import AuthContext
from .schemas import SendEmailRequest

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = {
    "invoice": Invoice,
    "purchase_order": PurchaseOrder,
    "receipt": Receipt,
}


class DeliveryFailed(ExternalServiceFailure):
    """SMTP rejected the message; carries the failed log row."""

    def __init__(self, message: str, email_log: EmailLog):
        super().__init__(message)
        self.email_log = email_log


def _decode_attachment(data: SendEmailRequest) -> Optional[Attachment]:
    if not data.pdf_base64:
        return None
    try:
        content = base64.b64decode(data.pdf_base64, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInput("Lampiran PDF tidak valid")
    filename = data.pdf_filename or f"{data.document_type}.pdf"
    return Attachment(filename=filename, content=content)


def send_document_email(db: Session, ctx: AuthContext, data: SendEmailRequest) -> EmailLog:
    """Send a document to a recipient through the organization's SMTP account.

    Raises:
        NotFound / CrossTenant: Document missing or owned by another org
        InvalidInput: Email not configured, or a malformed attachment
        DeliveryFailed: SMTP failure; the failed log row is flushed
    """
    DocumentService(db, DOCUMENT_MODELS[data.document_type]).get(ctx, data.document_id)

    config = load_smtp_config(db, ctx.org_id)
    if config is None:
        raise InvalidInput(NOT_CONFIGURED_MESSAGE)

    attachment = _decode_attachment(data)

    email_log = EmailLog(
        org_id=ctx.org_id,
        document_type=data.document_type,
        document_id=data.document_id,
        recipient_email=data.to,
        recipient_name=data.to_name,
        subject=data.subject,
        status="pending",
        sent_by=ctx.user_id,
    )
    db.add(email_log)
    db.flush()

    msg = build_message(config, data.to, data.subject, data.html, to_name=data.to_name, attachment=attachment)
    try:
        send_message(config, msg)
    except SmtpSendError as e:
        email_log.status = "failed"
        email_log.error_message = str(e)
        db.flush()
        emails_sent_total.labels(kind="document", status="failed").inc()
        logger.error(
            "Document email failed",
            extra={
                "org_id": ctx.org_id,
                "document_type": data.document_type,
                "document_id": data.document_id,
            },
        )
        raise DeliveryFailed(f"Gagal mengirim email: {e}", email_log) from e

    email_log.status = "sent"
    email_log.sent_at = utcnow()
    db.flush()
    emails_sent_total.labels(kind="document", status="sent").inc()
    logger.info(
        "Document email sent",
        extra={
            "org_id": ctx.org_id,
            "document_type": data.document_type,
            "document_id": data.document_id,
        },
    )
    return email_log


def list_logs(
    db: Session,
    ctx: AuthContext,
    document_type: Optional[str] = None,
    document_id: Optional[UUID] = None,
) -> List[EmailLog]:
    query = db.query(EmailLog).filter(EmailLog.org_id == ctx.org_id)
    if document_type:
        query = query.filter(EmailLog.document_type == document_type)
    if document_id:
        query = query.filter(EmailLog.document_id == document_id)
    return query.order_by(desc(EmailLog.created_at)).all()
