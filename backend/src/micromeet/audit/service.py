"""Writing audit entries.

Entries are added to the caller's session and flushed, so they commit or
roll back together with the change they describe. Action names in use:

- LOGIN_SUCCESS, LOGIN_FAILED, PASSWORD_CHANGED, PASSWORD_RESET
- ORGANIZATION_CREATED, ORGANIZATION_RENAMED
- MEMBER_JOINED, MEMBER_ROLE_CHANGED, MEMBER_REMOVED
- INVITATION_CREATED, INVITATION_CANCELLED, INVITATION_RESENT
- DOCUMENT_DELETED, DOCUMENT_RESTORED, DOCUMENT_PURGED
- DOCUMENT_PREFIX_CHANGED, EMAIL_SETTINGS_UPDATED
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from ..models.audit_log import AuditLog


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def log_audit_event(
    db: Session,
    org_id: UUID,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuditLog:
    """Record that actor_id performed action on (entity_type, entity_id).

    ``actor_id`` is None for actions taken by the scheduler.
    """
    entry = AuditLog(
        org_id=org_id,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(entry)
    db.flush()
    return entry


def log_from_request(db: Session, request: Request, org_id: UUID, action: str, **fields) -> AuditLog:
    """log_audit_event with the client address and User-Agent of request."""
    return log_audit_event(
        db=db,
        org_id=org_id,
        action=action,
        ip_address=client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        **fields,
    )
