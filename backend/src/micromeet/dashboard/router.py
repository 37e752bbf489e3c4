"""Dashboard endpoints"""

from typing import List

from fastapi import APIRouter

from ..auth.dependencies import DbSession, OptionalTenantContext
from . import service
from .schemas import DashboardStats, RecentDocument, RevenuePoint, TopCustomer

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: DbSession, ctx: OptionalTenantContext):
    return service.get_stats(db, ctx)


@router.get("/revenue", response_model=List[RevenuePoint])
def get_revenue_chart(db: DbSession, ctx: OptionalTenantContext):
    return service.get_revenue_chart(db, ctx)


@router.get("/top-customers", response_model=List[TopCustomer])
def get_top_customers(db: DbSession, ctx: OptionalTenantContext):
    return service.get_top_customers(db, ctx)


@router.get("/recent", response_model=List[RecentDocument])
def get_recent_documents(db: DbSession, ctx: OptionalTenantContext):
    return service.get_recent_documents(db, ctx)
