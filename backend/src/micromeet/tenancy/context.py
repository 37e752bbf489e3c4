"""Tenant context resolved once per request.

The organization and role a caller acts under are derived from their
membership row at the edge (see micromeet.auth.dependencies) and then passed
explicitly as an AuthContext to every service call. Nothing below the router
layer looks the membership up again.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import NoOrganization, Unauthenticated
from ..models.member import OrganizationMember
from ..models.user import User


class MemberRole(str, Enum):
    """Roles within an organization.

    Values are stored as TEXT in organization_member.role.
    """
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID
    org_id: UUID
    role: MemberRole

    @property
    def is_manager(self) -> bool:
        return self.role in (MemberRole.OWNER, MemberRole.ADMIN)


def _lookup(db: Session, user_id: Optional[UUID]) -> tuple[Optional[User], Optional[OrganizationMember]]:
    if user_id is None:
        return None, None

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None, None

    membership = db.execute(
        select(OrganizationMember).where(OrganizationMember.user_id == user_id)
    ).scalar_one_or_none()
    return user, membership


def resolve_required(db: Session, user_id: Optional[UUID]) -> AuthContext:
    """Resolve the caller's tenant context or fail.

    Args:
        db: Database session
        user_id: Identity from the session token, or None when anonymous

    Returns:
        AuthContext: user, organization and role

    Raises:
        Unauthenticated: No identity, or the identity maps to no active user
        NoOrganization: The user exists but has no membership yet
    """
    user, membership = _lookup(db, user_id)
    if user is None:
        raise Unauthenticated()
    if membership is None:
        raise NoOrganization()

    return AuthContext(
        user_id=user.id,
        org_id=membership.org_id,
        role=MemberRole(membership.role),
    )


def resolve_optional(db: Session, user_id: Optional[UUID]) -> Optional[AuthContext]:
    """Same lookup as resolve_required, returning None instead of raising.

    Read paths use this so anonymous or unprovisioned callers get empty
    results rather than errors.
    """
    try:
        return resolve_required(db, user_id)
    except (Unauthenticated, NoOrganization):
        return None
