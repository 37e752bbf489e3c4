"""Customer management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from . import service
from .schemas import CustomerCreate, CustomerResponse, CustomerUpdate

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=List[CustomerResponse])
def list_customers(
    db: DbSession,
    ctx: OptionalTenantContext,
    q: Optional[str] = Query(None, description="Search name, email or phone"),
):
    return service.list_customers(db, ctx, q)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: UUID, db: DbSession, ctx: TenantContext):
    return service.get_customer(db, ctx, customer_id)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, db: DbSession, ctx: TenantContext):
    customer = service.create_customer(db, ctx, data)
    db.commit()
    db.refresh(customer)
    return customer


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(customer_id: UUID, data: CustomerUpdate, db: DbSession, ctx: TenantContext):
    customer = service.update_customer(db, ctx, customer_id, data)
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: UUID, db: DbSession, ctx: TenantContext):
    service.delete_customer(db, ctx, customer_id)
    db.commit()
