"""Invoice endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from ..customers.service import ensure_customer_in_org
from ..documents.pricing import priced_values, repriced_changes
from ..documents.service import DeletedFilter, DocumentService
from ..errors import InvalidInput
from ..models.invoice import Invoice
from .overdue import mark_overdue_invoices
from .schemas import (
    InvoiceCreate,
    InvoiceResponse,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceUpdate,
    OverdueSweepResponse,
)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.get("", response_model=List[InvoiceResponse])
def list_invoices(
    db: DbSession,
    ctx: OptionalTenantContext,
    status: Optional[InvoiceStatus] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    deleted: DeletedFilter = Query(DeletedFilter.ACTIVE),
):
    return DocumentService(db, Invoice).list(
        ctx, status=status, search=search, date_from=date_from, date_to=date_to, deleted=deleted
    )


@router.post("/mark-overdue", response_model=OverdueSweepResponse)
def refresh_overdue_invoices(db: DbSession, ctx: TenantContext):
    """Run the overdue sweep for the caller's organization now."""
    updated = mark_overdue_invoices(db, org_id=ctx.org_id)
    db.commit()
    return OverdueSweepResponse(updated=updated)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: UUID, db: DbSession, ctx: TenantContext, include_deleted: bool = False):
    return DocumentService(db, Invoice).get(ctx, invoice_id, include_deleted=include_deleted)


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(data: InvoiceCreate, db: DbSession, ctx: TenantContext):
    ensure_customer_in_org(db, ctx, data.customer_id)
    values = data.model_dump(exclude={"items", "tax_rate"})
    values.update(priced_values(data.items, data.tax_rate))

    invoice = DocumentService(db, Invoice).create(ctx, values)
    db.commit()
    db.refresh(invoice)
    return invoice


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(invoice_id: UUID, data: InvoiceUpdate, db: DbSession, ctx: TenantContext):
    service = DocumentService(db, Invoice)
    changes = data.model_dump(exclude_unset=True)
    if "customer_id" in changes:
        ensure_customer_in_org(db, ctx, changes["customer_id"])

    current = service.load_for_mutation(ctx, invoice_id)
    issued = changes.get("date", current.date)
    due = changes.get("due_date", current.due_date)
    if due < issued:
        raise InvalidInput("Tanggal jatuh tempo tidak boleh sebelum tanggal invoice")

    invoice = service.update(ctx, invoice_id, repriced_changes(current, changes))
    db.commit()
    db.refresh(invoice)
    return invoice


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
def update_invoice_status(invoice_id: UUID, data: InvoiceStatusUpdate, db: DbSession, ctx: TenantContext):
    invoice = DocumentService(db, Invoice).update_status(ctx, invoice_id, data.status)
    db.commit()
    db.refresh(invoice)
    return invoice


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(invoice_id: UUID, db: DbSession, ctx: TenantContext):
    """Soft delete. The invoice can be restored until it is purged."""
    DocumentService(db, Invoice).soft_delete(ctx, invoice_id)
    db.commit()


@router.post("/{invoice_id}/restore", response_model=InvoiceResponse)
def restore_invoice(invoice_id: UUID, db: DbSession, ctx: TenantContext):
    invoice = DocumentService(db, Invoice).restore(ctx, invoice_id)
    db.commit()
    db.refresh(invoice)
    return invoice


@router.delete("/{invoice_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
def purge_invoice(invoice_id: UUID, db: DbSession, ctx: TenantContext):
    DocumentService(db, Invoice).purge(ctx, invoice_id)
    db.commit()
