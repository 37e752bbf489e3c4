"""Bank account service.

Exactly one account per organization is the default whenever any exist: the
first account becomes default, marking another as default clears the
previous one, and deleting the default promotes the oldest remaining account.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..errors import NotFound
from ..models.bank_account import BankAccount
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from .schemas import BankAccountCreate, BankAccountUpdate


def list_accounts(db: Session, ctx: Optional[AuthContext]) -> List[BankAccount]:
    if ctx is None:
        return []
    return list(db.execute(
        select(BankAccount)
        .where(BankAccount.org_id == ctx.org_id)
        .order_by(BankAccount.is_default.desc(), BankAccount.created_at)
    ).scalars().all())


def get_default(db: Session, ctx: Optional[AuthContext]) -> Optional[BankAccount]:
    if ctx is None:
        return None
    return db.execute(
        select(BankAccount).where(BankAccount.org_id == ctx.org_id, BankAccount.is_default.is_(True))
    ).scalars().first()


def _clear_default(db: Session, org_id: UUID) -> None:
    db.execute(
        update(BankAccount)
        .where(BankAccount.org_id == org_id, BankAccount.is_default.is_(True))
        .values(is_default=False)
    )


def _load(db: Session, ctx: AuthContext, account_id: UUID) -> BankAccount:
    account = db.get(BankAccount, account_id)
    if account is None:
        raise NotFound("Rekening bank tidak ditemukan")
    authorize(Action.MANAGE_ORG, Resource(org_id=account.org_id), ctx)
    return account


def create_account(db: Session, ctx: AuthContext, data: BankAccountCreate) -> BankAccount:
    authorize(Action.MANAGE_ORG, Resource(org_id=ctx.org_id), ctx)

    is_first = not list_accounts(db, ctx)
    make_default = data.is_default or is_first
    if make_default:
        _clear_default(db, ctx.org_id)

    account = BankAccount(org_id=ctx.org_id, **data.model_dump(exclude={"is_default"}), is_default=make_default)
    db.add(account)
    db.flush()
    return account


def update_account(db: Session, ctx: AuthContext, account_id: UUID, data: BankAccountUpdate) -> BankAccount:
    account = _load(db, ctx, account_id)
    changes = data.model_dump(exclude_unset=True)

    # Unsetting the default directly would leave the org without one
    if changes.pop("is_default", None):
        _clear_default(db, ctx.org_id)
        account.is_default = True

    for field, value in changes.items():
        setattr(account, field, value)
    db.flush()
    db.refresh(account)
    return account


def set_default(db: Session, ctx: AuthContext, account_id: UUID) -> BankAccount:
    account = _load(db, ctx, account_id)
    _clear_default(db, ctx.org_id)
    account.is_default = True
    db.flush()
    db.refresh(account)
    return account


def delete_account(db: Session, ctx: AuthContext, account_id: UUID) -> None:
    account = _load(db, ctx, account_id)
    was_default = account.is_default
    db.delete(account)
    db.flush()

    if was_default:
        replacement = db.execute(
            select(BankAccount)
            .where(BankAccount.org_id == ctx.org_id)
            .order_by(BankAccount.created_at)
        ).scalars().first()
        if replacement is not None:
            replacement.is_default = True
            db.flush()
