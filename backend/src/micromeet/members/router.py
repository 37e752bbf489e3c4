"""Member management endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Request, status

from ..audit.service import log_from_request
from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from . import service
from .schemas import MemberResponse, MemberRoleUpdate

router = APIRouter(prefix="/members", tags=["Members"])


@router.get("", response_model=List[MemberResponse])
def list_members(db: DbSession, ctx: OptionalTenantContext):
    return service.list_members(db, ctx)


@router.patch("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def change_member_role(member_id: UUID, data: MemberRoleUpdate, request: Request, db: DbSession, ctx: TenantContext):
    membership, old_role = service.change_role(db, ctx, member_id, data.role)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="MEMBER_ROLE_CHANGED",
        actor_id=ctx.user_id,
        entity_type="member",
        entity_id=membership.user_id,
        metadata={"old_role": old_role, "new_role": data.role},
    )
    db.commit()


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(member_id: UUID, request: Request, db: DbSession, ctx: TenantContext):
    membership = service.remove_member(db, ctx, member_id)
    log_from_request(
        db=db,
        request=request,
        org_id=ctx.org_id,
        action="MEMBER_REMOVED",
        actor_id=ctx.user_id,
        entity_type="member",
        entity_id=membership.user_id,
        metadata={"role": membership.role},
    )
    db.commit()
