"""Bank account endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, status

from ..auth.dependencies import DbSession, OptionalTenantContext, TenantContext
from . import service
from .schemas import BankAccountCreate, BankAccountResponse, BankAccountUpdate

router = APIRouter(prefix="/bank-accounts", tags=["Bank Accounts"])


@router.get("", response_model=List[BankAccountResponse])
def list_bank_accounts(db: DbSession, ctx: OptionalTenantContext):
    return service.list_accounts(db, ctx)


@router.get("/default", response_model=Optional[BankAccountResponse])
def get_default_bank_account(db: DbSession, ctx: OptionalTenantContext):
    return service.get_default(db, ctx)


@router.post("", response_model=BankAccountResponse, status_code=status.HTTP_201_CREATED)
def create_bank_account(data: BankAccountCreate, db: DbSession, ctx: TenantContext):
    account = service.create_account(db, ctx, data)
    db.commit()
    db.refresh(account)
    return account


@router.patch("/{account_id}", response_model=BankAccountResponse)
def update_bank_account(account_id: UUID, data: BankAccountUpdate, db: DbSession, ctx: TenantContext):
    account = service.update_account(db, ctx, account_id, data)
    db.commit()
    db.refresh(account)
    return account


@router.post("/{account_id}/default", response_model=BankAccountResponse)
def set_default_bank_account(account_id: UUID, db: DbSession, ctx: TenantContext):
    account = service.set_default(db, ctx, account_id)
    db.commit()
    db.refresh(account)
    return account


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bank_account(account_id: UUID, db: DbSession, ctx: TenantContext):
    service.delete_account(db, ctx, account_id)
    db.commit()
