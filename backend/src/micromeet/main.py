"""Micromeet Invoices Backend - Main FastAPI Application

Multi-tenant invoicing, purchase order and receipt management.

This module creates and configures the FastAPI application, including:
- All API routers under /api/v1
- Middleware (request ID correlation, CORS)
- Exception handlers for the domain error taxonomy
- Health and observability endpoints at the root
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .config import get_settings
from .errors import DomainError, TooManyAttempts, Unauthenticated

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# Accounts and tenancy
from .auth.router import router as auth_router
from .organizations.router import router as organizations_router
from .members.router import router as members_router
from .invitations.router import router as invitations_router

# Documents
from .customers.router import router as customers_router
from .invoices.router import router as invoices_router
from .purchase_orders.router import router as purchase_orders_router
from .receipts.router import router as receipts_router
from .document_numbers.router import router as document_numbers_router
from .dashboard.router import router as dashboard_router

# Organization settings
from .company_settings.router import router as company_settings_router
from .bank_accounts.router import router as bank_accounts_router
from .terms_templates.router import router as terms_templates_router
from .email_settings.router import router as email_settings_router

# Email, files, audit
from .emails.router import router as emails_router
from .files.router import router as files_router
from .audit.router import router as audit_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

API_ROUTERS = (
    auth_router,
    organizations_router,
    members_router,
    invitations_router,
    customers_router,
    invoices_router,
    purchase_orders_router,
    receipts_router,
    document_numbers_router,
    dashboard_router,
    company_settings_router,
    bank_accounts_router,
    terms_templates_router,
    email_settings_router,
    emails_router,
    files_router,
    audit_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info("Micromeet API starting up...")
    logger.info(f"Environment: {settings.ENV}")

    yield

    logger.info("Micromeet API shutting down...")


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a DomainError with the status code its class carries."""
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, TooManyAttempts):
        headers = {"Retry-After": str(exc.retry_after)}
    if exc.status_code >= 500:
        logger.warning(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
            extra={"status_code": exc.status_code},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Data tidak valid",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "Terjadi kesalahan database. Silakan coba lagi.",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions; details are logged, not returned."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "Terjadi kesalahan. Silakan coba lagi.",
        },
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app() -> FastAPI:
    """Build the FastAPI application.

    Tests call this directly and override get_db on the result.
    """
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    docs_enabled = settings.ENV != "production"
    app = FastAPI(
        title="Micromeet Invoices API",
        description="Multi-tenant invoicing, purchase order and receipt management",
        version=__version__,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    # Request ID middleware (must be first for proper correlation)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(observability_router)
    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        return {
            "name": "Micromeet Invoices API",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if docs_enabled else None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("micromeet.main:app", host="0.0.0.0", port=8000)
