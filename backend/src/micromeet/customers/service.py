"""Customer service - tenant-scoped customer records"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models.base import utcnow
from ..models.customer import Customer
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from .schemas import CustomerCreate, CustomerUpdate


def _resource(customer: Customer) -> Resource:
    return Resource(org_id=customer.org_id, owner_id=customer.created_by)


def get_customer(db: Session, ctx: AuthContext, customer_id: UUID, action: Action = Action.VIEW) -> Customer:
    """Load a customer and check ctx may perform action on it.

    Raises:
        NotFound: No such customer
        CrossTenant: Customer belongs to another organization
        Forbidden: Member editing a customer created by someone else
    """
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Pelanggan tidak ditemukan")
    authorize(action, _resource(customer), ctx)
    return customer


def ensure_customer_in_org(db: Session, ctx: AuthContext, customer_id: Optional[UUID]) -> None:
    """Documents may only link customers of the caller's own organization."""
    if customer_id is not None:
        get_customer(db, ctx, customer_id)


def list_customers(db: Session, ctx: Optional[AuthContext], q: Optional[str] = None) -> List[Customer]:
    """Customers ordered by name; q matches name, email or phone."""
    if ctx is None:
        return []

    stmt = select(Customer).where(Customer.org_id == ctx.org_id)
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(
                Customer.name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.phone.ilike(pattern),
            )
        )
    return list(db.execute(stmt.order_by(Customer.name)).scalars().all())


def create_customer(db: Session, ctx: AuthContext, data: CustomerCreate) -> Customer:
    authorize(Action.CREATE_DOCUMENT, Resource(org_id=ctx.org_id), ctx)
    customer = Customer(org_id=ctx.org_id, created_by=ctx.user_id, **data.model_dump())
    db.add(customer)
    db.flush()
    return customer


def update_customer(db: Session, ctx: AuthContext, customer_id: UUID, data: CustomerUpdate) -> Customer:
    customer = get_customer(db, ctx, customer_id, Action.EDIT_DOCUMENT)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    customer.updated_at = utcnow()
    db.flush()
    return customer


def delete_customer(db: Session, ctx: AuthContext, customer_id: UUID) -> None:
    """Hard delete. Documents keep their own snapshot of the customer."""
    customer = get_customer(db, ctx, customer_id, Action.DELETE_DOCUMENT)
    db.delete(customer)
    db.flush()
