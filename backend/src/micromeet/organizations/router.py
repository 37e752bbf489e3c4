"""Organization endpoints"""

from fastapi import APIRouter, status

from ..auth.dependencies import CurrentUser, DbSession, TenantContext
from ..models.org import Org
from . import service
from .schemas import OrganizationRename, OrganizationResponse

router = APIRouter(prefix="/organization", tags=["Organization"])


def _response(org: Org, role: str) -> OrganizationResponse:
    return OrganizationResponse(
        id=org.id,
        name=org.name,
        role=role,
        created_at=org.created_at,
        updated_at=org.updated_at,
    )


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
def create_organization(db: DbSession, user: CurrentUser):
    """Create the caller's organization, or return the one they already have."""
    membership = service.create_organization_for_user(db, user)
    db.commit()
    db.refresh(membership)
    return _response(membership.org, membership.role)


@router.get("", response_model=OrganizationResponse)
def get_organization(db: DbSession, ctx: TenantContext):
    return _response(service.get_organization(db, ctx), ctx.role.value)


@router.patch("", response_model=OrganizationResponse)
def rename_organization(data: OrganizationRename, db: DbSession, ctx: TenantContext):
    org = service.rename_organization(db, ctx, data.name)
    db.commit()
    db.refresh(org)
    return _response(org, ctx.role.value)
