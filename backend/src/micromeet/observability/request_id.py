"""Per-request correlation id.

The id arrives in (or is added to) the X-Request-ID header and is kept in a
ContextVar so every log line emitted while serving the request carries it.
Celery tasks and scripts run outside a request and log NO_REQUEST_ID.
"""

import re
import uuid
from contextvars import ContextVar, Token
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "no-request-id"

# Ids chosen by a proxy or the frontend are accepted if they look sane
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    return uuid.uuid4().hex


def request_id_from_header(value: Optional[str]) -> str:
    """Reuse the caller's id when it is well-formed, otherwise mint one."""
    if value and _ACCEPTED_ID.match(value):
        return value
    return generate_request_id()


def get_request_id() -> str:
    return request_id_var.get() or NO_REQUEST_ID


def set_request_id(request_id: str) -> Token:
    return request_id_var.set(request_id)


def reset_request_id(token: Token) -> None:
    request_id_var.reset(token)
