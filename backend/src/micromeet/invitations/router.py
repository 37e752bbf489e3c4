"""Invitation endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Request, status

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentUser, DbSession, OptionalTenantContext, TenantContext
from ..errors import InvalidState
from ..mail.delivery import deliver_quietly, record_skipped
from . import service
from .schemas import (
    InvitationAccept,
    InvitationAcceptResponse,
    InvitationCreate,
    InvitationResponse,
    InvitationVerifyResponse,
)

router = APIRouter(prefix="/invitations", tags=["Invitations"])


def _schedule_email(background_tasks: BackgroundTasks, email: Optional[service.InvitationEmail]) -> None:
    if email is None:
        record_skipped("invitation", "organization SMTP is not configured")
        return
    background_tasks.add_task(
        deliver_quietly, "invitation", email.config, email.to_email, email.subject, email.html
    )


@router.get("", response_model=List[InvitationResponse])
def list_invitations(db: DbSession, ctx: OptionalTenantContext):
    """Pending, unexpired invitations of the caller's organization."""
    return service.list_pending(db, ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_invitation(
    data: InvitationCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: DbSession,
    ctx: TenantContext,
):
    invitation, email = service.create_invitation(db, ctx, data.email, data.role)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="INVITATION_CREATED",
        actor_id=ctx.user_id,
        entity_type="invitation",
        entity_id=invitation.id,
        metadata={"email": invitation.email, "role": invitation.role},
    )
    db.commit()
    _schedule_email(background_tasks, email)
    return {"id": invitation.id}


@router.post("/{invitation_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel_invitation(invitation_id: UUID, request: Request, db: DbSession, ctx: TenantContext):
    invitation = service.cancel_invitation(db, ctx, invitation_id)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="INVITATION_CANCELLED",
        actor_id=ctx.user_id,
        entity_type="invitation",
        entity_id=invitation.id,
        metadata={"email": invitation.email},
    )
    db.commit()


@router.post("/{invitation_id}/resend", status_code=status.HTTP_204_NO_CONTENT)
def resend_invitation(
    invitation_id: UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    db: DbSession,
    ctx: TenantContext,
):
    invitation, email = service.resend_invitation(db, ctx, invitation_id)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="INVITATION_RESENT",
        actor_id=ctx.user_id,
        entity_type="invitation",
        entity_id=invitation.id,
        metadata={"email": invitation.email},
    )
    db.commit()
    _schedule_email(background_tasks, email)


@router.get("/verify/{token}", response_model=InvitationVerifyResponse)
def verify_invitation(token: str, db: DbSession):
    """Public: no session required."""
    return service.verify_token(db, token)


@router.post("/accept", response_model=InvitationAcceptResponse)
def accept_invitation(data: InvitationAccept, request: Request, db: DbSession, user: CurrentUser):
    try:
        invitation, already_member = service.accept_invitation(db, user, data.token)
    except InvalidState:
        # Keeps an expired invitation marked as such
        db.commit()
        raise

    if not already_member:
        log_from_request(
            db=db,
            request=request,
            org_id=invitation.org_id,
            action="MEMBER_JOINED",
            actor_id=user.id,
            entity_type="member",
            entity_id=user.id,
            metadata={"role": invitation.role, "invitation_id": str(invitation.id)},
        )
    db.commit()
    return InvitationAcceptResponse(already_member=already_member, organization_id=invitation.org_id)
