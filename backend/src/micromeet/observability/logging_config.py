"""Structured JSON logging configuration.

One JSON document per line on stdout. Every record carries the request id
of the HTTP request that produced it; tenant, document and mail identifiers
passed through ``extra=`` become top-level fields so log queries can filter
by organization or document without parsing messages.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .request_id import NO_REQUEST_ID, get_request_id

# extra= keys promoted into the JSON document
_EXTRA_FIELDS = (
    "org_id",
    "user_id",
    "document_type",
    "document_id",
    "document_number",
    "year",
    "smtp_host",
    "status_code",
    "duration_ms",
    "method",
    "path",
    "updated",
    "error_type",
)

_PLAIN_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "urllib3", "celery.redirected")


class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                entry[field] = value if value is None or isinstance(value, (int, float, bool)) else str(value)

        if record.exc_info:
            entry["error"] = str(record.exc_info[1])
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines when True, a readable one-line format otherwise
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    handler.addFilter(RequestIDFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
