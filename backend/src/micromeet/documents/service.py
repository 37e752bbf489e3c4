"""Document service - operations shared by invoices, purchase orders and receipts.

Every mutation follows the same sequence: load the row, NotFound if absent,
authorize (CrossTenant for foreign rows, Forbidden unless the caller may edit
it), apply the change, stamp updated_at. Services flush; routers commit.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Type
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..audit.service import log_audit_event
from ..errors import InvalidInput, InvalidState, NotFound
from ..models.base import utcnow
from ..observability.metrics import documents_created_total, documents_deleted_total
from ..tenancy.context import AuthContext
from ..tenancy.policy import Action, Resource, authorize
from . import lifecycle
from .numbering import allocate

logger = logging.getLogger(__name__)


class DeletedFilter(str, Enum):
    """Which lifecycle states a listing returns."""
    ACTIVE = "active"
    DELETED = "deleted"
    ALL = "all"


def _snapshot_name(snapshot: Optional[Dict[str, Any]]) -> str:
    return (snapshot or {}).get("name") or ""


# Free-text search runs over the number and the party names held in the
# JSON snapshots, which are not indexable portably.
SEARCH_FIELDS: Dict[str, Callable[[Any], Iterable[str]]] = {
    "invoice": lambda row: (row.invoice_number, _snapshot_name(row.customer)),
    "purchase_order": lambda row: (row.po_number, _snapshot_name(row.vendor)),
    "receipt": lambda row: (row.receipt_number, row.received_from, row.payment_for),
}


class DocumentService:
    """Tenant-scoped CRUD and lifecycle for one document model."""

    def __init__(self, db: Session, model: Type):
        self.db = db
        self.model = model
        self.document_type = model.document_type

    def _resource(self, row) -> Resource:
        return Resource(org_id=row.org_id, owner_id=row.created_by)

    def _load(self, document_id: UUID):
        row = self.db.get(self.model, document_id)
        if row is None:
            raise NotFound()
        return row

    def get(self, ctx: AuthContext, document_id: UUID, include_deleted: bool = False):
        """Fetch a document visible to ctx.

        Raises:
            NotFound: Missing, or soft-deleted and include_deleted is False
            CrossTenant: Row belongs to another organization
        """
        row = self._load(document_id)
        authorize(Action.VIEW, self._resource(row), ctx)
        if not include_deleted and lifecycle.is_deleted(row):
            raise NotFound()
        return row

    def load_for_mutation(self, ctx: AuthContext, document_id: UUID, action: Action = Action.EDIT_DOCUMENT):
        row = self._load(document_id)
        authorize(action, self._resource(row), ctx)
        return row

    def list(
        self,
        ctx: Optional[AuthContext],
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        deleted: DeletedFilter = DeletedFilter.ACTIVE,
    ) -> List[Any]:
        """List the organization's documents, newest first.

        Anonymous or unprovisioned callers (ctx is None) get an empty list.
        """
        if ctx is None:
            return []

        model = self.model
        query = self.db.query(model).filter(model.org_id == ctx.org_id)

        if deleted == DeletedFilter.ACTIVE:
            query = query.filter(model.deleted_at.is_(None))
        elif deleted == DeletedFilter.DELETED:
            query = query.filter(model.deleted_at.isnot(None))

        if status:
            if not hasattr(model, "status"):
                raise InvalidInput(f"{self.document_type} has no status")
            query = query.filter(model.status == status)
        if date_from:
            query = query.filter(model.date >= date_from)
        if date_to:
            query = query.filter(model.date <= date_to)

        rows = query.order_by(desc(model.created_at)).all()

        if search:
            term = search.strip().lower()
            fields = SEARCH_FIELDS[self.document_type]
            rows = [
                row for row in rows
                if any(term in (value or "").lower() for value in fields(row))
            ]

        return rows

    def create(self, ctx: AuthContext, values: Dict[str, Any]):
        """Insert a document under a freshly allocated number.

        The counter increment and the insert share the caller's transaction,
        so a failed insert does not consume a number.
        """
        authorize(Action.CREATE_DOCUMENT, Resource(org_id=ctx.org_id), ctx)

        allocated = allocate(self.db, ctx.org_id, self.document_type)
        now = utcnow()
        row = self.model(
            org_id=ctx.org_id,
            created_by=ctx.user_id,
            created_at=now,
            updated_at=now,
            **values,
        )
        setattr(row, self.model.number_attr, allocated.number)
        self.db.add(row)
        self.db.flush()

        documents_created_total.labels(document_type=self.document_type).inc()
        logger.info(
            "Document created",
            extra={
                "org_id": ctx.org_id,
                "user_id": ctx.user_id,
                "document_type": self.document_type,
                "document_id": row.id,
                "document_number": allocated.number,
            },
        )
        return row

    def update(self, ctx: AuthContext, document_id: UUID, values: Dict[str, Any]):
        row = self.load_for_mutation(ctx, document_id)
        if lifecycle.is_deleted(row):
            raise InvalidState("Dokumen yang sudah dihapus tidak dapat diubah")

        for field, value in values.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self.db.flush()
        return row

    def update_status(self, ctx: AuthContext, document_id: UUID, status: str):
        return self.update(ctx, document_id, {"status": status})

    def soft_delete(self, ctx: AuthContext, document_id: UUID):
        row = self.load_for_mutation(ctx, document_id, Action.DELETE_DOCUMENT)
        lifecycle.soft_delete(row)
        self.db.flush()
        self._record(ctx, row, "DOCUMENT_DELETED", "soft_delete")
        return row

    def restore(self, ctx: AuthContext, document_id: UUID):
        row = self.load_for_mutation(ctx, document_id, Action.DELETE_DOCUMENT)
        lifecycle.restore(row)
        self.db.flush()
        self._record(ctx, row, "DOCUMENT_RESTORED", "restore")
        return row

    def purge(self, ctx: AuthContext, document_id: UUID) -> None:
        row = self.load_for_mutation(ctx, document_id, Action.DELETE_DOCUMENT)
        # Captured before the row is gone
        row_id, number = row.id, row.document_number
        lifecycle.purge(self.db, row)
        log_audit_event(
            db=self.db,
            org_id=ctx.org_id,
            action="DOCUMENT_PURGED",
            actor_id=ctx.user_id,
            entity_type=self.document_type,
            entity_id=row_id,
            metadata={"number": number},
        )
        documents_deleted_total.labels(document_type=self.document_type, action="purge").inc()

    def _record(self, ctx: AuthContext, row, audit_action: str, metric_action: str) -> None:
        log_audit_event(
            db=self.db,
            org_id=ctx.org_id,
            action=audit_action,
            actor_id=ctx.user_id,
            entity_type=self.document_type,
            entity_id=row.id,
            metadata={"number": row.document_number},
        )
        documents_deleted_total.labels(document_type=self.document_type, action=metric_action).inc()
