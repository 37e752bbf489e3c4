"""Receipt endpoints"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from ..customers.service import ensure_customer_in_org
from ..documents.service import DeletedFilter, DocumentService
from ..documents.terbilang import terbilang
from ..documents.totals import round_money
from ..models.receipt import Receipt
from .schemas import ReceiptCreate, ReceiptResponse, ReceiptUpdate

router = APIRouter(prefix="/receipts", tags=["Receipts"])


@router.get("", response_model=List[ReceiptResponse])
def list_receipts(
    db: DbSession,
    ctx: OptionalTenantContext,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    deleted: DeletedFilter = Query(DeletedFilter.ACTIVE),
):
    return DocumentService(db, Receipt).list(
        ctx, search=search, date_from=date_from, date_to=date_to, deleted=deleted
    )


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(receipt_id: UUID, db: DbSession, ctx: TenantContext, include_deleted: bool = False):
    return DocumentService(db, Receipt).get(ctx, receipt_id, include_deleted=include_deleted)


@router.post("", response_model=ReceiptResponse, status_code=status.HTTP_201_CREATED)
def create_receipt(data: ReceiptCreate, db: DbSession, ctx: TenantContext):
    ensure_customer_in_org(db, ctx, data.customer_id)
    values = data.model_dump()
    values["amount"] = round_money(data.amount)
    if not values.get("amount_in_words"):
        values["amount_in_words"] = terbilang(data.amount)

    receipt = DocumentService(db, Receipt).create(ctx, values)
    db.commit()
    db.refresh(receipt)
    return receipt


@router.patch("/{receipt_id}", response_model=ReceiptResponse)
def update_receipt(receipt_id: UUID, data: ReceiptUpdate, db: DbSession, ctx: TenantContext):
    changes = data.model_dump(exclude_unset=True)
    if "customer_id" in changes:
        ensure_customer_in_org(db, ctx, changes["customer_id"])
    if changes.get("amount") is not None:
        changes["amount"] = round_money(changes["amount"])
        # A new amount invalidates the old wording unless a new one is given
        if not changes.get("amount_in_words"):
            changes["amount_in_words"] = terbilang(changes["amount"])

    receipt = DocumentService(db, Receipt).update(ctx, receipt_id, changes)
    db.commit()
    db.refresh(receipt)
    return receipt


@router.delete("/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receipt(receipt_id: UUID, db: DbSession, ctx: TenantContext):
    DocumentService(db, Receipt).soft_delete(ctx, receipt_id)
    db.commit()


@router.post("/{receipt_id}/restore", response_model=ReceiptResponse)
def restore_receipt(receipt_id: UUID, db: DbSession, ctx: TenantContext):
    receipt = DocumentService(db, Receipt).restore(ctx, receipt_id)
    db.commit()
    db.refresh(receipt)
    return receipt


@router.delete("/{receipt_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
def purge_receipt(receipt_id: UUID, db: DbSession, ctx: TenantContext):
    DocumentService(db, Receipt).purge(ctx, receipt_id)
    db.commit()
