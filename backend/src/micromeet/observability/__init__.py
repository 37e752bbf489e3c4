"""Structured logging, request correlation, metrics and health checks."""

from .logging_config import configure_logging, get_logger
from .metrics import (
    document_numbers_allocated_total,
    documents_created_total,
    documents_deleted_total,
    emails_sent_total,
    http_request_duration_seconds,
    overdue_invoices_marked_total,
)
from .middleware import RequestIDMiddleware
from .request_id import REQUEST_ID_HEADER, get_request_id, request_id_from_header

__all__ = [
    "configure_logging",
    "get_logger",
    "document_numbers_allocated_total",
    "documents_created_total",
    "documents_deleted_total",
    "emails_sent_total",
    "http_request_duration_seconds",
    "overdue_invoices_marked_total",
    "RequestIDMiddleware",
    "REQUEST_ID_HEADER",
    "get_request_id",
    "request_id_from_header",
]
