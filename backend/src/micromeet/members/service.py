"""Member service - listing, role changes and removal.

All permission rules for membership changes live in tenancy.policy; this
module only loads rows and applies the change.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from ..errors import NotFound
from ..models.member import OrganizationMember
from ..tenancy.context import AuthContext, MemberRole
from ..tenancy.policy import Action, Resource, authorize
from .schemas import MemberResponse


def list_members(db: Session, ctx: Optional[AuthContext]) -> List[MemberResponse]:
    if ctx is None:
        return []

    memberships = db.execute(
        select(OrganizationMember)
        .options(joinedload(OrganizationMember.user))
        .where(OrganizationMember.org_id == ctx.org_id)
        .order_by(OrganizationMember.joined_at)
    ).scalars().all()

    return [
        MemberResponse(
            id=m.id,
            user_id=m.user_id,
            name=(m.user.name if m.user else None) or "Unknown",
            email=m.user.email if m.user else "",
            image_key=m.user.image_key if m.user else None,
            role=m.role,
            joined_at=m.joined_at,
            is_current_user=m.user_id == ctx.user_id,
        )
        for m in memberships
    ]


def _load_for(db: Session, ctx: AuthContext, member_id: UUID, action: Action) -> OrganizationMember:
    membership = db.get(OrganizationMember, member_id)
    if membership is None:
        raise NotFound("Anggota tidak ditemukan")
    authorize(
        action,
        Resource(
            org_id=membership.org_id,
            member_user_id=membership.user_id,
            member_role=MemberRole(membership.role),
        ),
        ctx,
    )
    return membership


def change_role(db: Session, ctx: AuthContext, member_id: UUID, role: str) -> tuple[OrganizationMember, str]:
    """Returns the membership and its previous role."""
    membership = _load_for(db, ctx, member_id, Action.CHANGE_MEMBER_ROLE)
    old_role = membership.role
    membership.role = role
    db.flush()
    return membership, old_role


def remove_member(db: Session, ctx: AuthContext, member_id: UUID) -> OrganizationMember:
    membership = _load_for(db, ctx, member_id, Action.REMOVE_MEMBER)
    db.delete(membership)
    db.flush()
    return membership
