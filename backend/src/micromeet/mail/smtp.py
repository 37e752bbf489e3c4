"""SMTP transport for outbound mail.

Builds MIME messages (HTML body plus optional attachment) and delivers them
through an SMTP account. Port 465 style servers are reached with implicit TLS
when ``secure`` is set; otherwise STARTTLS is used when the server offers it.
"""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Optional

logger = logging.getLogger(__name__)


class SmtpSendError(Exception):
    """Connecting, authenticating or sending failed."""
    pass


@dataclass
class SmtpConfig:
    host: str
    port: int
    secure: bool
    user: Optional[str]
    password: Optional[str]
    sender_name: str
    sender_email: str
    reply_to: Optional[str] = None
    timeout: int = 30

    @property
    def from_header(self) -> str:
        return formataddr((self.sender_name, self.sender_email))


@dataclass
class Attachment:
    filename: str
    content: bytes
    mime_type: str = "application/pdf"


def build_message(
    config: SmtpConfig,
    to_email: str,
    subject: str,
    html: str,
    to_name: Optional[str] = None,
    attachment: Optional[Attachment] = None,
) -> MIMEMultipart:
    """Create the MIME message.

    Args:
        config: Sending account (From / Reply-To)
        to_email: Recipient address
        subject: Subject line
        html: HTML body
        to_name: Recipient display name
        attachment: Optional file attachment (e.g. the document PDF)

    Returns:
        MIMEMultipart: Email message
    """
    msg = MIMEMultipart()
    msg['From'] = config.from_header
    msg['To'] = formataddr((to_name, to_email)) if to_name else to_email
    msg['Subject'] = subject
    msg['Message-ID'] = make_msgid(domain=config.sender_email.split("@")[-1])
    if config.reply_to:
        msg['Reply-To'] = config.reply_to

    msg.attach(MIMEText(html, 'html', 'utf-8'))

    if attachment:
        maintype, subtype = attachment.mime_type.split('/', 1)
        part = MIMEBase(maintype, subtype)
        part.set_payload(attachment.content)
        encoders.encode_base64(part)
        part.add_header('Content-Disposition', f'attachment; filename="{attachment.filename}"')
        msg.attach(part)

    return msg


def _connect(config: SmtpConfig) -> smtplib.SMTP:
    context = ssl.create_default_context()
    if config.secure:
        return smtplib.SMTP_SSL(config.host, config.port, timeout=config.timeout, context=context)

    smtp = smtplib.SMTP(config.host, config.port, timeout=config.timeout)
    smtp.ehlo()
    if smtp.has_extn("starttls"):
        smtp.starttls(context=context)
        smtp.ehlo()
    return smtp


def send_message(config: SmtpConfig, msg: MIMEMultipart) -> None:
    """Deliver a message. No retry.

    Raises:
        SmtpSendError: On any SMTP or socket failure
    """
    try:
        smtp = _connect(config)
        try:
            if config.user and config.password:
                smtp.login(config.user, config.password)
            smtp.send_message(msg)
        finally:
            smtp.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.warning(
            "SMTP delivery failed",
            extra={"smtp_host": config.host, "error_type": type(e).__name__},
        )
        raise SmtpSendError(str(e)) from e

    logger.info("Email sent", extra={"smtp_host": config.host})


def verify_connection(config: SmtpConfig) -> None:
    """Connect and authenticate without sending anything.

    Raises:
        SmtpSendError: If the server cannot be reached or rejects the login
    """
    try:
        smtp = _connect(config)
        try:
            if config.user and config.password:
                smtp.login(config.user, config.password)
            smtp.noop()
        finally:
            smtp.quit()
    except (smtplib.SMTPException, OSError) as e:
        raise SmtpSendError(str(e)) from e
