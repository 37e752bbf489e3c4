"""Brute-force protection for the unauthenticated auth endpoints.

Two Redis-backed counters:

- a sliding window of attempts per client (IP + User-Agent) on register,
  login and password-reset request
- failed logins per email; reaching LOCKOUT_THRESHOLD locks the client out
  for LOCKOUT_DURATION seconds

Limits are shared by every API process. Without Redis both checks pass.
"""

import hashlib
import logging
import secrets
import time
from typing import Optional

from fastapi import Request
from redis import Redis
from redis.exceptions import RedisError

from ..audit.service import client_ip
from ..config import get_settings
from ..errors import TooManyAttempts

logger = logging.getLogger(__name__)


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()[:32]


def client_fingerprint(request: Request) -> str:
    return _digest(f"{client_ip(request) or 'unknown'}:{request.headers.get('User-Agent', '')}")


def connect_redis() -> Optional[Redis]:
    try:
        client = Redis.from_url(get_settings().REDIS_URL, decode_responses=True, socket_connect_timeout=1)
        client.ping()
        return client
    except (RedisError, OSError):
        logger.warning("Redis unavailable, auth rate limiting disabled")
        return None


class RateLimiter:
    """Attempt window and lockout bookkeeping. Connects lazily."""

    def __init__(self):
        self._redis: Optional[Redis] = None
        self._connected = False

    @property
    def redis(self) -> Optional[Redis]:
        if not self._connected:
            self._redis = connect_redis()
            self._connected = True
        return self._redis

    def lockout_remaining(self, request: Request) -> int:
        """Seconds until the client may try again; 0 when not locked out."""
        if not self.redis:
            return 0
        return max(0, self.redis.ttl(f"lockout:{client_fingerprint(request)}"))

    def hit(self, request: Request, scope: str = "auth") -> int:
        """Count one attempt and return how many fall inside the window,
        this one included."""
        if not self.redis:
            return 0
        window = get_settings().RATE_LIMIT_WINDOW
        key = f"rate_limit:{scope}:{client_fingerprint(request)}"
        now = time.time()

        self.redis.zremrangebyscore(key, 0, now - window)
        self.redis.zadd(key, {f"{now}:{secrets.token_hex(4)}": now})
        self.redis.expire(key, window)
        return self.redis.zcard(key)

    def record_failed_login(self, email: str, request: Request) -> bool:
        """Returns True when this failure triggered a lockout."""
        if not self.redis:
            return False
        settings = get_settings()
        key = f"failed_attempts:{_digest(email.lower())}"

        failures = self.redis.incr(key)
        self.redis.expire(key, settings.RATE_LIMIT_WINDOW)
        if failures < settings.LOCKOUT_THRESHOLD:
            return False

        self.redis.setex(f"lockout:{client_fingerprint(request)}", settings.LOCKOUT_DURATION, "1")
        logger.warning("Login lockout triggered", extra={"attempts": failures})
        return True

    def clear_failed_attempts(self, email: str) -> None:
        if self.redis:
            self.redis.delete(f"failed_attempts:{_digest(email.lower())}")


rate_limiter = RateLimiter()


def check_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding register, login and reset requests."""
    remaining = rate_limiter.lockout_remaining(request)
    if remaining:
        raise TooManyAttempts(remaining, f"Terlalu banyak percobaan gagal. Coba lagi dalam {remaining} detik.")

    settings = get_settings()
    if rate_limiter.hit(request) > settings.RATE_LIMIT_MAX_ATTEMPTS:
        raise TooManyAttempts(settings.RATE_LIMIT_WINDOW)
