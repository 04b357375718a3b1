"""Email transport via SMTP.

Delivers one message per call.  Supports STARTTLS (587), SSL (465) or a
plain relay when TLS is turned off.  Connection-level failures are retried;
anything still failing is raised as TransportError.
"""

from __future__ import annotations

import logging
import smtplib
import socket
import ssl
from email.message import EmailMessage
from typing import Optional, Protocol

from . import config
from .errors import TransportError
from .utils import retryable

logger = logging.getLogger(__name__)

# Worth another attempt: the server dropped us or never answered.
_TRANSIENT_ERRORS = (
    smtplib.SMTPConnectError,
    smtplib.SMTPServerDisconnected,
    socket.timeout,
    ConnectionError,
)


class MailTransport(Protocol):
    def send(self, sender: str, recipient: str, subject: str, body: str) -> None:
        ...


def build_message(sender: str, recipient: str, subject: str, body: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = recipient
    msg.set_content(body)
    return msg


class SmtpTransport:
    """Sends mail through an SMTP server using externally supplied settings."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        use_tls: bool = True,
        timeout: float = 20.0,
        max_attempts: int = 3,
        backoff: float = 1.0,
    ):
        self.host = host
        self.port = int(port)
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self._deliver_with_retry = retryable(
            _TRANSIENT_ERRORS, max_attempts=max_attempts, backoff=backoff
        )(self._deliver)

    @classmethod
    def from_config(cls) -> "SmtpTransport":
        return cls(
            config.EMAIL_SMTP_HOST,
            config.EMAIL_SMTP_PORT,
            config.EMAIL_USERNAME,
            config.EMAIL_PASSWORD,
            use_tls=config.EMAIL_USE_TLS,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
            max_attempts=config.EMAIL_MAX_ATTEMPTS,
        )

    def _login(self, s: smtplib.SMTP) -> None:
        if self.username:
            s.login(self.username, self.password or "")

    def _deliver(self, msg: EmailMessage) -> None:
        if self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, context=ssl.create_default_context(),
                                  timeout=self.timeout) as s:
                self._login(s)
                s.send_message(msg)
        elif self.use_tls:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as s:
                s.ehlo()
                s.starttls(context=ssl.create_default_context())
                s.ehlo()
                self._login(s)
                s.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as s:
                self._login(s)
                s.send_message(msg)

    def send(self, sender: str, recipient: str, subject: str, body: str) -> None:
        try:
            msg = build_message(sender, recipient, subject, body)
            self._deliver_with_retry(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise TransportError(f"Failed to send email to {recipient}: {e}") from e
        logger.info("Email sent to %s (subject=%s)", recipient, subject)


__all__ = ["MailTransport", "SmtpTransport", "build_message"]
