"""Authentication and account endpoints.

Registration, login, the current user's profile, password change and the
password reset flow. None of these require an organization.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..audit.service import log_from_request
from ..errors import AlreadyExists, InvalidInput, Unauthenticated
from ..mail.delivery import deliver_quietly, record_skipped
from ..models.base import utcnow
from ..models.user import User
from .dependencies import CurrentUser, DbSession
from .jwt import create_access_token, get_jwt_expiry_minutes
from .password import hash_password, needs_rehash, verify_password
from .password_policy import PasswordValidationError, check_password_strength
from .password_reset import confirm_reset, request_reset, verify_reset_token
from .rate_limit import check_rate_limit, rate_limiter
from .schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetVerify,
    PasswordResetVerifyResponse,
    ProfileUpdate,
    RegisterRequest,
    SuccessResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

INVALID_CREDENTIALS = "Email atau password salah"

RateLimited = Annotated[None, Depends(check_rate_limit)]


def _token_response(user: User) -> LoginResponse:
    return LoginResponse(
        access_token=create_access_token(user_id=user.id, email=user.email),
        token_type="bearer",
        expires_in=get_jwt_expiry_minutes() * 60,
    )


def _check_password(password: str, user_context: list) -> None:
    try:
        check_password_strength(password, user_context=user_context)
    except PasswordValidationError as e:
        raise InvalidInput(e.message, details={"errors": e.errors})


def _audit_for_member(db, request: Request, user: User, action: str, metadata=None) -> None:
    """Audit entries are per organization; users without one are only logged."""
    if user.membership is None:
        logger.info(f"{action} (no organization)", extra={"user_id": user.id})
        return
    log_from_request(
        db=db,
        request=request,
        org_id=user.membership.org_id,
        action=action,
        actor_id=user.id,
        entity_type="user",
        entity_id=user.id,
        metadata=metadata,
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: DbSession, _: RateLimited):
    """Create an account and sign it in.

    The new user has no organization yet; the client follows up with
    POST /organization or by accepting an invitation.
    """
    email = data.email.lower()
    _check_password(data.password, [email, data.name])

    if db.execute(select(User.id).where(User.email == email)).first():
        raise AlreadyExists("Email sudah terdaftar")

    user = User(
        email=email,
        name=data.name,
        password_hash=hash_password(data.password),
        status="ACTIVE",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExists("Email sudah terdaftar")
    db.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})
    return _token_response(user)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, request: Request, db: DbSession, _: RateLimited):
    """Authenticate user and return JWT access token.

    Security measures:
    - Rate limiting per client and lockout after repeated failures
    - Constant-time password verification
    - Failed logins of organization members are written to audit_log
    - Disabled accounts are rejected with the same message as bad passwords
    """
    email = credentials.email.lower()
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    if user is None or not verify_password(credentials.password, user.password_hash):
        if user is not None:
            _audit_for_member(db, request, user, "LOGIN_FAILED", {"reason": "invalid_credentials"})
            db.commit()
        rate_limiter.record_failed_login(email, request)
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not user.is_active:
        _audit_for_member(db, request, user, "LOGIN_FAILED", {"reason": "account_disabled"})
        db.commit()
        rate_limiter.record_failed_login(email, request)
        raise Unauthenticated(INVALID_CREDENTIALS)

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(credentials.password)
    user.last_login_at = utcnow()
    _audit_for_member(db, request, user, "LOGIN_SUCCESS")
    db.commit()
    db.refresh(user)

    rate_limiter.clear_failed_attempts(email)
    return _token_response(user)


@router.get("/me", response_model=MeResponse)
def get_me(user: CurrentUser):
    membership = user.membership
    return MeResponse(
        user=UserResponse.model_validate(user),
        organization_id=membership.org_id if membership else None,
        organization_name=membership.org.name if membership else None,
        role=membership.role if membership else None,
    )


@router.patch("/me", response_model=UserResponse)
def update_me(data: ProfileUpdate, db: DbSession, user: CurrentUser):
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.post("/change-password", response_model=SuccessResponse)
def change_password(data: ChangePasswordRequest, request: Request, db: DbSession, user: CurrentUser):
    if not verify_password(data.current_password, user.password_hash):
        raise InvalidInput("Password saat ini salah")
    _check_password(data.new_password, [user.email, user.name])

    user.password_hash = hash_password(data.new_password)
    user.updated_at = utcnow()
    _audit_for_member(db, request, user, "PASSWORD_CHANGED")
    db.commit()
    return SuccessResponse()


@router.post("/password-reset/request", response_model=SuccessResponse)
def request_password_reset(
    data: PasswordResetRequest,
    background_tasks: BackgroundTasks,
    db: DbSession,
    _: RateLimited,
):
    """Always succeeds so the response never reveals whether an account exists."""
    email = request_reset(db, data.email)
    db.commit()
    if email is None:
        record_skipped("password_reset", "unknown account or SMTP_HOST not set")
    else:
        background_tasks.add_task(
            deliver_quietly, "password_reset", email.config, email.to_email, email.subject, email.html, email.to_name
        )
    return SuccessResponse()


@router.post("/password-reset/verify", response_model=PasswordResetVerifyResponse)
def verify_password_reset(data: PasswordResetVerify, db: DbSession):
    error = verify_reset_token(db, data.token)
    return PasswordResetVerifyResponse(valid=error is None, error=error)


@router.post("/password-reset/confirm", response_model=SuccessResponse)
def confirm_password_reset(data: PasswordResetConfirm, request: Request, db: DbSession):
    user = confirm_reset(db, data.token, data.new_password)
    _audit_for_member(db, request, user, "PASSWORD_RESET")
    db.commit()
    rate_limiter.clear_failed_attempts(user.email)
    return SuccessResponse()
