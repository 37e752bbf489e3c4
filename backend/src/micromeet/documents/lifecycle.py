"""Document lifecycle: Active -> Deleted(at) -> Purged.

The state is stored as ``deleted_at`` on the row (NULL = Active) and read
back through ``lifecycle_of``. Transitions:

    Active  --soft_delete-->  Deleted(at)
    Deleted --restore------>  Active
    Deleted --purge-------->  Purged  (row removed, terminal)

Anything else is rejected: restoring or purging an active document raises
NotDeleted, deleting an already deleted one raises AlreadyDeleted. Permission
checks happen in the service before any transition is attempted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..errors import AlreadyDeleted, NotDeleted
from ..models.base import utcnow


@dataclass(frozen=True)
class Active:
    pass


@dataclass(frozen=True)
class Deleted:
    at: datetime


@dataclass(frozen=True)
class Purged:
    pass


Lifecycle = Union[Active, Deleted, Purged]


def lifecycle_of(row) -> Lifecycle:
    if row.deleted_at is None:
        return Active()
    return Deleted(at=row.deleted_at)


def is_deleted(row) -> bool:
    return isinstance(lifecycle_of(row), Deleted)


def soft_delete(row, now: Optional[datetime] = None) -> Deleted:
    if is_deleted(row):
        raise AlreadyDeleted()
    now = now or utcnow()
    row.deleted_at = now
    row.updated_at = now
    return Deleted(at=now)


def restore(row, now: Optional[datetime] = None) -> Active:
    if not is_deleted(row):
        raise NotDeleted()
    row.deleted_at = None
    row.updated_at = now or utcnow()
    return Active()


def purge(db: Session, row) -> Purged:
    """Hard-delete a soft-deleted row. Only Deleted rows may be purged."""
    if not is_deleted(row):
        raise NotDeleted()
    db.delete(row)
    db.flush()
    return Purged()
