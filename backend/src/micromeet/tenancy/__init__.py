"""Tenant context resolution and authorization policy."""

from .context import AuthContext, MemberRole, resolve_optional, resolve_required
from .policy import (
    Action,
    Resource,
    authorize,
    can_delete,
    can_edit,
    can_manage_members,
    can_manage_org,
    evaluate,
)

__all__ = [
    "AuthContext",
    "MemberRole",
    "resolve_optional",
    "resolve_required",
    "Action",
    "Resource",
    "authorize",
    "can_delete",
    "can_edit",
    "can_manage_members",
    "can_manage_org",
    "evaluate",
]
