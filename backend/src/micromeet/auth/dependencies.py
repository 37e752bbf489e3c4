"""FastAPI dependencies for authentication and tenant context.

This is the edge where a request's identity becomes an AuthContext. Routers
declare one of the aliases below and pass the resolved context explicitly to
services:

    @router.post("/invoices")
    def create_invoice(data: InvoiceCreate, ctx: TenantContext, db: DbSession):
        return service.create(db, ctx, data)

- CurrentUser: authenticated user, organization not required
- TenantContext: authenticated user with an organization (401/403 otherwise)
- OptionalTenantContext: AuthContext or None, for read paths that render
  empty results for anonymous or unprovisioned callers
"""

import logging
from typing import Annotated, Optional
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import Unauthenticated
from ..models.user import User
from ..tenancy.context import AuthContext, resolve_optional, resolve_required
from .jwt import decode_token

logger = logging.getLogger(__name__)

# auto_error=False: missing credentials are mapped to Unauthenticated (or
# anonymous on optional paths) instead of FastAPI's default 403.
security = HTTPBearer(auto_error=False)


def _user_id_from_token(token: str) -> UUID:
    """Decode a bearer token into the user id it was issued for.

    Raises:
        Unauthenticated: Token expired, tampered, or missing the sub claim
    """
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError as e:
        raise Unauthenticated(f"Invalid token: {e}")

    subject = payload.get("sub")
    if not subject:
        raise Unauthenticated("Invalid token: missing user ID claim")

    try:
        return UUID(subject)
    except ValueError:
        raise Unauthenticated("Invalid token claims")


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[UUID]:
    """Identity for optional paths: a user id, or None when anonymous.

    An invalid or expired token is treated as anonymous here.
    """
    if credentials is None:
        return None
    try:
        return _user_id_from_token(credentials.credentials)
    except Unauthenticated:
        logger.debug("Ignoring invalid bearer token on optional route")
        return None


def get_required_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UUID:
    if credentials is None:
        raise Unauthenticated()
    return _user_id_from_token(credentials.credentials)


def get_current_user(
    user_id: UUID = Depends(get_required_identity),
    db: Session = Depends(get_db),
) -> User:
    """Load the authenticated user; the user need not belong to an organization.

    Raises:
        Unauthenticated: Token invalid, user missing or disabled
    """
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise Unauthenticated()
    return user


def get_auth_context(
    user_id: UUID = Depends(get_required_identity),
    db: Session = Depends(get_db),
) -> AuthContext:
    return resolve_required(db, user_id)


def get_optional_auth_context(
    user_id: Optional[UUID] = Depends(get_identity),
    db: Session = Depends(get_db),
) -> Optional[AuthContext]:
    return resolve_optional(db, user_id)


DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
TenantContext = Annotated[AuthContext, Depends(get_auth_context)]
OptionalTenantContext = Annotated[Optional[AuthContext], Depends(get_optional_auth_context)]
