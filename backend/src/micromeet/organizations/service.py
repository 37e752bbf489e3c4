"""Organization provisioning and settings"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..audit.service import log_audit_event
from ..errors import NoOrganization
from ..models.base import utcnow
from ..models.member import OrganizationMember
from ..models.org import Org
from ..models.user import User
from ..tenancy.context import AuthContext, MemberRole
from ..tenancy.policy import Action, Resource, authorize

logger = logging.getLogger(__name__)


def default_organization_name(user: User) -> str:
    return f"{user.name}'s Organization" if user.name else "My Organization"


def get_membership(db: Session, user_id) -> Optional[OrganizationMember]:
    return db.execute(
        select(OrganizationMember).where(OrganizationMember.user_id == user_id)
    ).scalar_one_or_none()


def create_organization_for_user(db: Session, user: User) -> OrganizationMember:
    """Provision an organization with user as owner.

    Idempotent: a user who already belongs to an organization gets their
    existing membership back.
    """
    existing = get_membership(db, user.id)
    if existing is not None:
        return existing

    org = Org(name=default_organization_name(user), settings_json={})
    db.add(org)
    db.flush()

    membership = OrganizationMember(org_id=org.id, user_id=user.id, role=MemberRole.OWNER.value)
    db.add(membership)
    db.flush()

    log_audit_event(
        db=db,
        org_id=org.id,
        action="ORGANIZATION_CREATED",
        actor_id=user.id,
        entity_type="organization",
        entity_id=org.id,
        metadata={"name": org.name},
    )
    logger.info("Organization created", extra={"org_id": org.id, "user_id": user.id})
    return membership


def get_organization(db: Session, ctx: AuthContext) -> Org:
    org = db.get(Org, ctx.org_id)
    if org is None:
        raise NoOrganization()
    return org


def rename_organization(db: Session, ctx: AuthContext, name: str) -> Org:
    authorize(Action.RENAME_ORG, Resource(org_id=ctx.org_id), ctx)
    org = get_organization(db, ctx)
    old_name = org.name
    org.name = name
    org.updated_at = utcnow()
    db.flush()

    log_audit_event(
        db=db,
        org_id=org.id,
        action="ORGANIZATION_RENAMED",
        actor_id=ctx.user_id,
        entity_type="organization",
        entity_id=org.id,
        metadata={"old_name": old_name, "new_name": org.name},
    )
    return org
