"""Prometheus scrape, health and readiness endpoints.

Mounted at the application root, outside /api/v1, and unauthenticated.
"""

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..auth.dependencies import DbSession
from .health import (
    ComponentHealth,
    HealthStatus,
    check_database_health,
    check_object_storage_health,
    check_redis_health,
    get_overall_health,
)

router = APIRouter(tags=["Observability"])


def _component(health: ComponentHealth) -> dict:
    return {"status": health.status.value, "message": health.message, "latency_ms": health.latency_ms}


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health")
def health(db: DbSession):
    """Status of every dependency. 503 only when the database is down."""
    checks = {
        "database": check_database_health(db),
        "redis": check_redis_health(),
        "object_storage": check_object_storage_health(),
    }
    overall = get_overall_health(checks)
    return JSONResponse(
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
        content={
            "status": overall.value,
            "components": {name: _component(check) for name, check in checks.items()},
        },
    )


@router.get("/ready")
def ready(db: DbSession):
    """Ready once the database answers."""
    database = check_database_health(db)
    if database.status != HealthStatus.HEALTHY:
        return JSONResponse(status_code=503, content={"status": "not_ready", "message": database.message})
    return {"status": "ready", "message": "Application is ready to serve traffic"}
