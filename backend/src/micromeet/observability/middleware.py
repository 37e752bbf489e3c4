"""Request correlation and access logging middleware."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .metrics import http_request_duration_seconds
from .request_id import REQUEST_ID_HEADER, request_id_from_header, reset_request_id, set_request_id

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of the request and echo it back.

    Unhandled exceptions are logged here with the id before they reach the
    generic 500 handler.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(request_id)
        started = time.perf_counter()

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} raised {type(e).__name__}",
                    extra={"error_type": type(e).__name__, "duration_ms": _elapsed_ms(started)},
                    exc_info=True,
                )
                raise

            http_request_duration_seconds.labels(
                method=request.method, status_code=str(response.status_code)
            ).observe(time.perf_counter() - started)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": _elapsed_ms(started),
                },
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            reset_request_id(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
