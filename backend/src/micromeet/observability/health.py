"""Dependency probes behind /health and /ready.

Only the database is essential. Redis (login rate limiting) and object
storage (logos, signatures, avatars) degrade the service when down but
do not make it unhealthy.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type

import boto3
import redis
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def _probe(
    label: str,
    call: Callable[[], object],
    errors: Tuple[Type[BaseException], ...],
    on_failure: HealthStatus,
) -> ComponentHealth:
    started = time.perf_counter()
    try:
        call()
    except errors as e:
        logger.warning(f"{label} health check failed: {e}")
        return ComponentHealth(status=on_failure, message=f"{label} error: {e}")
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message=f"{label} connection OK",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )


def check_database_health(db: Session) -> ComponentHealth:
    return _probe("Database", lambda: db.execute(text("SELECT 1")), (SQLAlchemyError,), HealthStatus.UNHEALTHY)


def check_redis_health() -> ComponentHealth:
    def ping():
        redis.from_url(get_settings().REDIS_URL, socket_connect_timeout=1).ping()

    return _probe("Redis", ping, (redis.RedisError, OSError), HealthStatus.DEGRADED)


def check_object_storage_health() -> ComponentHealth:
    settings = get_settings()

    def head_bucket():
        client = boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            region_name=settings.S3_REGION,
            config=BotoConfig(connect_timeout=2, read_timeout=2, retries={"max_attempts": 0}),
        )
        client.head_bucket(Bucket=settings.S3_BUCKET_NAME)

    return _probe("Object storage", head_bucket, (BotoCoreError, ClientError), HealthStatus.DEGRADED)


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    statuses = {c.status for c in components.values()}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY
