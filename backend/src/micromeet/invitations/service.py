"""Invitation service.

Lifecycle: pending -> accepted, or pending -> expired (cancelled by an
owner/admin, or found past expires_at on accept). Resending a pending
invitation rotates the token and restarts the expiry window.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from ..config import get_settings
from ..email_settings.service import load_smtp_config
from ..errors import AlreadyExists, Forbidden, InvalidState, NotFound
from ..mail.smtp import SmtpConfig
from ..mail.templates import invitation_html, invitation_subject
from ..models.base import utcnow
from ..models.invitation import Invitation
from ..models.member import OrganizationMember
from ..models.org import Org
from ..models.user import User
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from .schemas import InvitationResponse, InvitationVerifyResponse

logger = logging.getLogger(__name__)

TOKEN_BYTES = 48  # 64 url-safe characters


def generate_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def _expiry():
    return utcnow() + timedelta(days=get_settings().INVITATION_EXPIRY_DAYS)


@dataclass
class InvitationEmail:
    """Everything needed to send the invitation after commit."""
    config: SmtpConfig
    to_email: str
    subject: str
    html: str


def _build_email(db: Session, ctx: AuthContext, invitation: Invitation) -> Optional[InvitationEmail]:
    config = load_smtp_config(db, ctx.org_id)
    if config is None:
        return None

    settings = get_settings()
    org = db.get(Org, ctx.org_id)
    inviter = db.get(User, ctx.user_id)
    organization_name = org.name if org else "Organisasi"

    return InvitationEmail(
        config=config,
        to_email=invitation.email,
        subject=invitation_subject(organization_name),
        html=invitation_html(
            inviter_name=(inviter.name if inviter else None) or "Admin",
            organization_name=organization_name,
            role=invitation.role,
            invitation_url=f"{settings.SITE_URL}?invitationToken={invitation.token}",
            expiry_days=settings.INVITATION_EXPIRY_DAYS,
        ),
    )


def list_pending(db: Session, ctx: Optional[AuthContext]) -> List[InvitationResponse]:
    if ctx is None:
        return []

    now = utcnow()
    invitations = db.execute(
        select(Invitation)
        .options(joinedload(Invitation.inviter))
        .where(
            Invitation.org_id == ctx.org_id,
            Invitation.status == "pending",
            Invitation.expires_at > now,
        )
        .order_by(Invitation.created_at.desc())
    ).scalars().all()

    return [
        InvitationResponse(
            id=inv.id,
            email=inv.email,
            role=inv.role,
            invited_by_name=(inv.inviter.name if inv.inviter else None) or "Unknown",
            expires_at=inv.expires_at,
        )
        for inv in invitations
    ]


def create_invitation(db: Session, ctx: AuthContext, email: str, role: str) -> tuple[Invitation, Optional[InvitationEmail]]:
    """Create a pending invitation.

    Raises:
        Forbidden: Caller is a plain member
        AlreadyExists: Email already belongs to a member, or an active
            invitation for it is outstanding
    """
    authorize(Action.MANAGE_MEMBERS, Resource(org_id=ctx.org_id), ctx)
    email = email.strip().lower()

    is_member = db.execute(
        select(OrganizationMember.id)
        .join(User, User.id == OrganizationMember.user_id)
        .where(OrganizationMember.org_id == ctx.org_id, func.lower(User.email) == email)
    ).first()
    if is_member:
        raise AlreadyExists("Email ini sudah terdaftar sebagai anggota organisasi")

    active = db.execute(
        select(Invitation.id).where(
            Invitation.org_id == ctx.org_id,
            Invitation.email == email,
            Invitation.status == "pending",
            Invitation.expires_at > utcnow(),
        )
    ).first()
    if active:
        raise AlreadyExists("Undangan untuk email ini sudah dikirim dan masih aktif")

    invitation = Invitation(
        org_id=ctx.org_id,
        email=email,
        role=role,
        token=generate_token(),
        status="pending",
        invited_by=ctx.user_id,
        expires_at=_expiry(),
    )
    db.add(invitation)
    db.flush()
    return invitation, _build_email(db, ctx, invitation)


def _load_own(db: Session, ctx: AuthContext, invitation_id: UUID) -> Invitation:
    authorize(Action.MANAGE_MEMBERS, Resource(org_id=ctx.org_id), ctx)
    invitation = db.get(Invitation, invitation_id)
    if invitation is None:
        raise NotFound("Undangan tidak ditemukan")
    authorize(Action.MANAGE_MEMBERS, Resource(org_id=invitation.org_id), ctx)
    return invitation


def cancel_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> Invitation:
    invitation = _load_own(db, ctx, invitation_id)
    invitation.status = "expired"
    db.flush()
    return invitation


def resend_invitation(db: Session, ctx: AuthContext, invitation_id: UUID) -> tuple[Invitation, Optional[InvitationEmail]]:
    invitation = _load_own(db, ctx, invitation_id)
    if invitation.status != "pending":
        raise InvalidState("Undangan sudah tidak aktif")

    invitation.token = generate_token()
    invitation.expires_at = _expiry()
    db.flush()
    return invitation, _build_email(db, ctx, invitation)


def _find_by_token(db: Session, token: str) -> Optional[Invitation]:
    return db.execute(select(Invitation).where(Invitation.token == token)).scalar_one_or_none()


def verify_token(db: Session, token: str) -> InvitationVerifyResponse:
    """Public check used by the accept-invitation page before sign-in."""
    invitation = _find_by_token(db, token)
    if invitation is None:
        return InvitationVerifyResponse(valid=False, error="Token undangan tidak valid")
    if invitation.status == "accepted":
        return InvitationVerifyResponse(valid=False, error="Undangan sudah digunakan")
    if invitation.status == "expired":
        return InvitationVerifyResponse(valid=False, error="Undangan sudah dibatalkan")
    if invitation.expires_at < utcnow():
        return InvitationVerifyResponse(valid=False, error="Undangan sudah kedaluwarsa")

    org = db.get(Org, invitation.org_id)
    return InvitationVerifyResponse(
        valid=True,
        email=invitation.email,
        role=invitation.role,
        organization_name=org.name if org else "Organisasi",
    )


def accept_invitation(db: Session, user: User, token: str) -> tuple[Invitation, bool]:
    """Join the inviting organization.

    A user belongs to at most one organization, so any previous membership
    is deleted in the same transaction as the new one is inserted.

    Returns:
        (invitation, already_member)

    Raises:
        NotFound: Unknown token
        InvalidState: Invitation no longer pending, or expired (in which case
            it is marked expired and that change is kept)
        Forbidden: Signed-in email differs from the invited email
    """
    invitation = _find_by_token(db, token)
    if invitation is None:
        raise NotFound("Token undangan tidak valid")
    if invitation.status != "pending":
        raise InvalidState("Undangan sudah tidak aktif")
    if invitation.expires_at < utcnow():
        invitation.status = "expired"
        db.flush()
        raise InvalidState("Undangan sudah kedaluwarsa")

    if user.email.lower() != invitation.email.lower():
        raise Forbidden(
            "Email akun Anda tidak sesuai dengan undangan. Silakan login dengan email yang diundang."
        )

    current = db.execute(
        select(OrganizationMember).where(OrganizationMember.user_id == user.id)
    ).scalar_one_or_none()

    if current is not None and current.org_id == invitation.org_id:
        invitation.status = "accepted"
        invitation.accepted_at = utcnow()
        db.flush()
        return invitation, True

    if current is not None:
        logger.info(
            "Leaving previous organization to accept invitation",
            extra={"org_id": current.org_id, "user_id": user.id},
        )
        db.delete(current)
        db.flush()

    db.add(OrganizationMember(org_id=invitation.org_id, user_id=user.id, role=invitation.role))
    invitation.status = "accepted"
    invitation.accepted_at = utcnow()
    db.flush()
    return invitation, False
