"""Purchase order endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from ..documents.pricing import priced_values, repriced_changes
from ..documents.service import DeletedFilter, DocumentService
from ..models.purchase_order import PurchaseOrder
from .schemas import (
    PurchaseOrderCreate,
    PurchaseOrderResponse,
    PurchaseOrderStatus,
    PurchaseOrderStatusUpdate,
    PurchaseOrderUpdate,
)

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])


@router.get("", response_model=List[PurchaseOrderResponse])
def list_purchase_orders(
    db: DbSession,
    ctx: OptionalTenantContext,
    status: Optional[PurchaseOrderStatus] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    deleted: DeletedFilter = Query(DeletedFilter.ACTIVE),
):
    return DocumentService(db, PurchaseOrder).list(
        ctx, status=status, search=search, date_from=date_from, date_to=date_to, deleted=deleted
    )


@router.get("/{po_id}", response_model=PurchaseOrderResponse)
def get_purchase_order(po_id: UUID, db: DbSession, ctx: TenantContext, include_deleted: bool = False):
    return DocumentService(db, PurchaseOrder).get(ctx, po_id, include_deleted=include_deleted)


@router.post("", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_order(data: PurchaseOrderCreate, db: DbSession, ctx: TenantContext):
    values = data.model_dump(exclude={"items", "tax_rate"})
    values.update(priced_values(data.items, data.tax_rate))

    po = DocumentService(db, PurchaseOrder).create(ctx, values)
    db.commit()
    db.refresh(po)
    return po


@router.patch("/{po_id}", response_model=PurchaseOrderResponse)
def update_purchase_order(po_id: UUID, data: PurchaseOrderUpdate, db: DbSession, ctx: TenantContext):
    service = DocumentService(db, PurchaseOrder)
    current = service.load_for_mutation(ctx, po_id)
    po = service.update(ctx, po_id, repriced_changes(current, data.model_dump(exclude_unset=True)))
    db.commit()
    db.refresh(po)
    return po


@router.patch("/{po_id}/status", response_model=PurchaseOrderResponse)
def update_purchase_order_status(po_id: UUID, data: PurchaseOrderStatusUpdate, db: DbSession, ctx: TenantContext):
    po = DocumentService(db, PurchaseOrder).update_status(ctx, po_id, data.status)
    db.commit()
    db.refresh(po)
    return po


@router.delete("/{po_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_order(po_id: UUID, db: DbSession, ctx: TenantContext):
    DocumentService(db, PurchaseOrder).soft_delete(ctx, po_id)
    db.commit()


@router.post("/{po_id}/restore", response_model=PurchaseOrderResponse)
def restore_purchase_order(po_id: UUID, db: DbSession, ctx: TenantContext):
    po = DocumentService(db, PurchaseOrder).restore(ctx, po_id)
    db.commit()
    db.refresh(po)
    return po


@router.delete("/{po_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
def purge_purchase_order(po_id: UUID, db: DbSession, ctx: TenantContext):
    DocumentService(db, PurchaseOrder).purge(ctx, po_id)
    db.commit()
