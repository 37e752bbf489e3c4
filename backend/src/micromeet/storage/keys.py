"""Storage key layout: ``{org_id}/{category}/{uuid}{ext}``.

The organization prefix is what ties an object to a tenant; a key with any
other prefix is treated as another organization's file.
"""

from pathlib import PurePosixPath
from uuid import uuid4

from ..errors import CrossTenant, InvalidInput
from ..tenancy.context import AuthContext

CATEGORIES = ("logo", "signature", "stamp", "avatar", "attachment")


def new_storage_key(ctx: AuthContext, category: str, filename: str) -> str:
    if category not in CATEGORIES:
        raise InvalidInput(f"Unknown file category: {category}")
    ext = PurePosixPath(filename).suffix.lower()
    return f"{ctx.org_id}/{category}/{uuid4()}{ext}"


def ensure_own_key(ctx: AuthContext, storage_key: str) -> str:
    """Reject keys outside the caller's organization.

    Raises:
        InvalidInput: Malformed key (path traversal, empty segments)
        CrossTenant: Key belongs to another organization
    """
    parts = storage_key.split("/")
    if len(parts) < 2 or any(part in ("", ".", "..") for part in parts):
        raise InvalidInput("Invalid storage key")
    if parts[0] != str(ctx.org_id):
        raise CrossTenant()
    return storage_key
