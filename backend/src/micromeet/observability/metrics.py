"""Prometheus metrics for Micromeet Invoices."""

from prometheus_client import Counter, Histogram

# Documents
documents_created_total = Counter(
    "micromeet_documents_created_total",
    "Total number of documents created",
    ["document_type"]  # invoice|purchase_order|receipt
)

document_numbers_allocated_total = Counter(
    "micromeet_document_numbers_allocated_total",
    "Total document numbers handed out by the counter",
    ["document_type"]
)

documents_deleted_total = Counter(
    "micromeet_documents_deleted_total",
    "Document lifecycle transitions",
    ["document_type", "action"]  # action: soft_delete|restore|purge
)

# Overdue sweep
overdue_invoices_marked_total = Counter(
    "micromeet_overdue_invoices_marked_total",
    "Invoices transitioned to overdue by the sweep"
)

# Email
emails_sent_total = Counter(
    "micromeet_emails_sent_total",
    "Outgoing emails",
    ["kind", "status"]  # kind: document|invitation|password_reset|test, status: sent|failed|skipped
)

# HTTP
http_request_duration_seconds = Histogram(
    "micromeet_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)
