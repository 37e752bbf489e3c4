"""Document number allocation.

Numbers are scoped to (organization, document type, calendar year) and
formatted as ``{PREFIX}-{YYYY}-{seq:04d}``, e.g. ``INV-2025-0001``. The
sequence is zero-padded to four digits and keeps growing past 9999. A new
year starts again at 1 under the organization's current prefix.

``allocate`` is a single atomic allocate-and-increment that runs inside the
caller's transaction, so the counter bump and the document insert commit or
roll back together:

1. ``UPDATE document_counter SET last_number = last_number + 1 ... RETURNING``
   locks the counter row, so concurrent allocations queue behind each other.
2. If no row exists yet, insert one with last_number = 1 inside a savepoint.
   Losing the insert race to another transaction trips the unique constraint
   on (org_id, type, year); the savepoint is rolled back and step 1 is retried
   against the row the winner created.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.base import utcnow
from ..models.document_counter import DocumentCounter
from ..models.org import Org
from ..observability.metrics import document_numbers_allocated_total

logger = logging.getLogger(__name__)


class DocumentType(str, Enum):
    INVOICE = "invoice"
    PURCHASE_ORDER = "purchase_order"
    RECEIPT = "receipt"


DEFAULT_PREFIXES = {
    DocumentType.INVOICE: "INV",
    DocumentType.PURCHASE_ORDER: "PO",
    DocumentType.RECEIPT: "KWT",
}

PREFIX_SETTINGS_KEY = "document_prefixes"


@dataclass(frozen=True)
class NextNumber:
    number: str
    next_sequence: int
    prefix: str
    year: int


def format_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}-{year:04d}-{sequence:04d}"


def current_year(now: Optional[datetime] = None) -> int:
    return (now or datetime.now(timezone.utc)).year


def configured_prefix(db: Session, org_id: UUID, doc_type: DocumentType) -> str:
    """Organization override from org.settings_json, else the type default."""
    doc_type = DocumentType(doc_type)
    org = db.get(Org, org_id)
    overrides = org.document_prefixes() if org else {}
    return overrides.get(doc_type.value) or DEFAULT_PREFIXES[doc_type]


_counter = DocumentCounter.__table__


def _key(org_id: UUID, doc_type: DocumentType, year: int):
    return (
        _counter.c.org_id == org_id,
        _counter.c.type == DocumentType(doc_type).value,
        _counter.c.year == year,
    )


def peek_next(db: Session, org_id: UUID, doc_type: DocumentType, year: Optional[int] = None) -> NextNumber:
    """Number the next allocation would produce. Read-only.

    The result is a preview: a concurrent allocation may take it first.
    """
    year = year or current_year()
    row = db.execute(
        select(_counter.c.last_number, _counter.c.prefix).where(*_key(org_id, doc_type, year))
    ).first()

    if row is None:
        prefix = configured_prefix(db, org_id, doc_type)
        sequence = 1
    else:
        prefix = row.prefix
        sequence = row.last_number + 1

    return NextNumber(
        number=format_number(prefix, year, sequence),
        next_sequence=sequence,
        prefix=prefix,
        year=year,
    )


def _bump(db: Session, org_id: UUID, doc_type: DocumentType, year: int):
    stmt = (
        update(_counter)
        .where(*_key(org_id, doc_type, year))
        .values(last_number=_counter.c.last_number + 1, updated_at=utcnow())
        .returning(_counter.c.last_number, _counter.c.prefix)
    )
    return db.execute(stmt).first()


def allocate(db: Session, org_id: UUID, doc_type: DocumentType, year: Optional[int] = None) -> NextNumber:
    """Atomically claim the next number for (org, type, year).

    Must run in the same transaction as the insert of the document that
    carries the number. Never commits.
    """
    doc_type = DocumentType(doc_type)
    year = year or current_year()

    row = _bump(db, org_id, doc_type, year)
    if row is not None:
        sequence, prefix = row.last_number, row.prefix
    else:
        prefix = configured_prefix(db, org_id, doc_type)
        try:
            with db.begin_nested():
                db.execute(
                    insert(_counter).values(
                        id=uuid4(),
                        org_id=org_id,
                        type=doc_type.value,
                        year=year,
                        prefix=prefix,
                        last_number=1,
                        updated_at=utcnow(),
                    )
                )
            sequence = 1
        except IntegrityError:
            logger.info(
                "Counter created concurrently, retrying increment",
                extra={"org_id": org_id, "document_type": doc_type.value, "year": year},
            )
            row = _bump(db, org_id, doc_type, year)
            sequence, prefix = row.last_number, row.prefix

    document_numbers_allocated_total.labels(document_type=doc_type.value).inc()

    return NextNumber(
        number=format_number(prefix, year, sequence),
        next_sequence=sequence,
        prefix=prefix,
        year=year,
    )


def increment(db: Session, org_id: UUID, doc_type: DocumentType, year: Optional[int] = None) -> int:
    """Advance the counter and return the claimed sequence."""
    return allocate(db, org_id, doc_type, year).next_sequence


def set_prefix(db: Session, org_id: UUID, doc_type: DocumentType, prefix: str, year: Optional[int] = None) -> NextNumber:
    """Store a prefix override for the organization.

    The override is saved in org.settings_json (used for counters created in
    later years) and applied to the current year's counter, which is created
    at last_number 0 if it does not exist yet.
    """
    doc_type = DocumentType(doc_type)
    year = year or current_year()

    org = db.get(Org, org_id)
    settings_json = dict(org.settings_json or {})
    prefixes = dict(settings_json.get(PREFIX_SETTINGS_KEY, {}))
    prefixes[doc_type.value] = prefix
    settings_json[PREFIX_SETTINGS_KEY] = prefixes
    org.settings_json = settings_json

    result = db.execute(
        update(_counter)
        .where(*_key(org_id, doc_type, year))
        .values(prefix=prefix, updated_at=utcnow())
    )
    if result.rowcount == 0:
        try:
            with db.begin_nested():
                db.execute(
                    insert(_counter).values(
                        id=uuid4(),
                        org_id=org_id,
                        type=doc_type.value,
                        year=year,
                        prefix=prefix,
                        last_number=0,
                        updated_at=utcnow(),
                    )
                )
        except IntegrityError:
            db.execute(
                update(_counter)
                .where(*_key(org_id, doc_type, year))
                .values(prefix=prefix, updated_at=utcnow())
            )

    db.flush()
    return peek_next(db, org_id, doc_type, year)
