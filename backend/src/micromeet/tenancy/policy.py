"""Centralized authorization policy.

Every permission decision in the service goes through ``evaluate`` (or its
raising wrapper ``authorize``) with an Action, the Resource being touched and
the caller's AuthContext. Handlers never branch on roles themselves.

Permission Matrix:
┌───────────────────────────┬───────┬───────┬──────────────────┐
│ Action                    │ owner │ admin │ member           │
├───────────────────────────┼───────┼───────┼──────────────────┤
│ View / create documents   │   ✓   │   ✓   │   ✓              │
│ Edit / delete / restore   │   ✓   │   ✓   │   own docs only  │
│ Manage org settings       │   ✓   │   ✓   │                  │
│ Rename organization       │   ✓   │       │                  │
│ Invite members            │   ✓   │   ✓   │                  │
│ Change role / remove      │   ✓   │  (1)  │                  │
│ View audit log            │   ✓   │   ✓   │                  │
└───────────────────────────┴───────┴───────┴──────────────────┘

(1) Admins may act on members only.

Membership rules: the owner role is immutable, only the owner may change or
remove an admin, and nobody may remove themself.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from ..errors import CrossTenant, Forbidden
from .context import AuthContext, MemberRole


class Action(str, Enum):
    VIEW = "view"
    CREATE_DOCUMENT = "create_document"
    EDIT_DOCUMENT = "edit_document"
    DELETE_DOCUMENT = "delete_document"
    MANAGE_ORG = "manage_org"
    RENAME_ORG = "rename_org"
    MANAGE_MEMBERS = "manage_members"
    CHANGE_MEMBER_ROLE = "change_member_role"
    REMOVE_MEMBER = "remove_member"
    VIEW_AUDIT = "view_audit"


@dataclass(frozen=True)
class Resource:
    """What an action targets.

    Attributes:
        org_id: Owning organization (None for org-less checks)
        owner_id: created_by of a document or customer
        member_user_id: Target user of a membership change
        member_role: Current role of that target
    """
    org_id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    member_user_id: Optional[UUID] = None
    member_role: Optional[MemberRole] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    cross_tenant: bool = False
    reason: Optional[str] = None


ALLOW = Decision(allowed=True)


def can_edit(ctx: AuthContext, owner_user_id: Optional[UUID]) -> bool:
    """Owner/admin edit anything in their org; members only what they created."""
    if ctx.is_manager:
        return True
    return owner_user_id is not None and owner_user_id == ctx.user_id


def can_delete(ctx: AuthContext, owner_user_id: Optional[UUID]) -> bool:
    return can_edit(ctx, owner_user_id)


def can_manage_org(ctx: AuthContext) -> bool:
    return ctx.is_manager


def can_manage_members(ctx: AuthContext) -> bool:
    return ctx.is_manager


def _membership_decision(action: Action, resource: Resource, ctx: AuthContext) -> Decision:
    changing = action == Action.CHANGE_MEMBER_ROLE

    if not can_manage_members(ctx):
        if changing:
            return Decision(False, reason="Hanya Owner atau Admin yang dapat mengubah role anggota")
        return Decision(False, reason="Hanya Owner atau Admin yang dapat menghapus anggota")

    if resource.member_role == MemberRole.OWNER:
        if changing:
            return Decision(False, reason="Tidak dapat mengubah role pemilik organisasi")
        return Decision(False, reason="Tidak dapat menghapus pemilik organisasi")

    if not changing and resource.member_user_id == ctx.user_id:
        return Decision(False, reason="Anda tidak dapat menghapus diri sendiri dari organisasi")

    if resource.member_role == MemberRole.ADMIN and ctx.role != MemberRole.OWNER:
        if changing:
            return Decision(False, reason="Hanya Owner yang dapat mengubah role Admin")
        return Decision(False, reason="Hanya Owner yang dapat menghapus Admin")

    return ALLOW


def evaluate(action: Action, resource: Resource, ctx: AuthContext) -> Decision:
    """Decide whether ctx may perform action on resource.

    Tenant ownership is checked before any role rule, so a foreign row is
    always reported as cross-tenant regardless of the caller's role.
    """
    if resource.org_id is not None and resource.org_id != ctx.org_id:
        return Decision(False, cross_tenant=True)

    if action in (Action.VIEW, Action.CREATE_DOCUMENT):
        return ALLOW

    if action == Action.EDIT_DOCUMENT:
        if can_edit(ctx, resource.owner_id):
            return ALLOW
        return Decision(False, reason="Anda hanya dapat mengubah dokumen yang Anda buat")

    if action == Action.DELETE_DOCUMENT:
        if can_delete(ctx, resource.owner_id):
            return ALLOW
        return Decision(False, reason="Anda hanya dapat menghapus dokumen yang Anda buat")

    if action == Action.MANAGE_ORG:
        if can_manage_org(ctx):
            return ALLOW
        return Decision(False, reason="Hanya Owner atau Admin yang dapat mengubah pengaturan organisasi")

    if action == Action.RENAME_ORG:
        if ctx.role == MemberRole.OWNER:
            return ALLOW
        return Decision(False, reason="Hanya pemilik yang dapat mengubah nama organisasi")

    if action == Action.MANAGE_MEMBERS:
        if can_manage_members(ctx):
            return ALLOW
        return Decision(False, reason="Hanya Owner atau Admin yang dapat mengundang anggota")

    if action in (Action.CHANGE_MEMBER_ROLE, Action.REMOVE_MEMBER):
        return _membership_decision(action, resource, ctx)

    if action == Action.VIEW_AUDIT:
        if ctx.is_manager:
            return ALLOW
        return Decision(False, reason="Hanya Owner atau Admin yang dapat melihat log audit")

    return Decision(False, reason=f"Unknown action: {action}")


def authorize(action: Action, resource: Resource, ctx: AuthContext) -> None:
    """Raise CrossTenant or Forbidden unless evaluate() allows the action."""
    decision = evaluate(action, resource, ctx)
    if decision.allowed:
        return
    if decision.cross_tenant:
        raise CrossTenant()
    raise Forbidden(decision.reason)
