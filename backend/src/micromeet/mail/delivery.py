"""Fire-and-forget delivery for system mail (invitations, password reset).

These messages are sent after the request's transaction has committed, from
a FastAPI background task. A failure is logged and counted but never
surfaces to the caller, and is not retried.
"""

import logging
from typing import Optional

from ..observability.metrics import emails_sent_total
from .smtp import SmtpConfig, SmtpSendError, build_message, send_message

logger = logging.getLogger(__name__)


def deliver_quietly(
    kind: str,
    config: SmtpConfig,
    to_email: str,
    subject: str,
    html: str,
    to_name: Optional[str] = None,
) -> bool:
    """Send one message, swallowing delivery errors.

    Args:
        kind: Metric label, e.g. "invitation" or "password_reset"

    Returns:
        bool: True if the SMTP server accepted the message
    """
    msg = build_message(config, to_email, subject, html, to_name=to_name)
    try:
        send_message(config, msg)
    except SmtpSendError as e:
        emails_sent_total.labels(kind=kind, status="failed").inc()
        logger.error(f"Failed to send {kind} email: {e}", extra={"error_type": type(e).__name__})
        return False

    emails_sent_total.labels(kind=kind, status="sent").inc()
    return True


def record_skipped(kind: str, reason: str) -> None:
    emails_sent_total.labels(kind=kind, status="skipped").inc()
    logger.warning(f"Skipping {kind} email: {reason}")
