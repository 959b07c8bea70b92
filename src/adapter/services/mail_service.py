"""Mail Service Implementations

Provides concrete mail transports for invoice delivery.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Optional
from uuid import uuid4

from src.app.services.mail_service import MailService, MailMessage
from src.domain.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class LoggingMailService(MailService):
    """
    Mail service that logs messages instead of sending them

    Useful for development and testing.
    """

    async def send(self, message: MailMessage) -> str:
        """
        Log the outgoing message

        Args:
            message: MailMessage to log

        Returns:
            Synthetic message ID
        """
        message_id = f"<{uuid4().hex}@localhost>"
        logger.info(
            f"[MAIL] To: {message.recipient}, Subject: {message.subject}, "
            f"Attachments: {[a.filename for a in message.attachments]}, "
            f"Message-ID: {message_id}"
        )
        return message_id


class SmtpMailService(MailService):
    """
    Mail service that sends through an SMTP relay

    smtplib is blocking, so each send runs in a worker thread. Every socket
    operation is bounded by timeout; the whole exchange is awaited for
    timeout + grace so a slow but live relay hits the socket timeout first.

    When the outer wait does expire, the worker thread cannot be cancelled
    and may still hand the message to the relay after DeliveryError was
    raised. A retry after such a timeout can therefore deliver the invoice
    twice.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str = "Invoice Service",
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        use_tls: bool = True,
        timeout: float = 30.0,
        grace: float = 1.0,
    ):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.use_tls = use_tls
        self.timeout = timeout
        self.grace = grace

    def build_email_message(self, message: MailMessage) -> EmailMessage:
        """Build a MIME message: text body, optional HTML alternative, attachments"""
        email_message = EmailMessage()
        email_message["From"] = formataddr((self.from_name, self.from_email))
        email_message["To"] = message.recipient
        email_message["Subject"] = message.subject
        email_message["Date"] = formatdate(localtime=True)

        domain = self.from_email.split("@")[-1] if "@" in self.from_email else "localhost"
        email_message["Message-ID"] = make_msgid(domain=domain)

        email_message.set_content(message.text_body)
        if message.html_body:
            email_message.add_alternative(message.html_body, subtype="html")
        for attachment in message.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            email_message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return email_message

    def _send_sync(self, email_message: EmailMessage) -> str:
        """Blocking SMTP exchange. Returns Message-ID."""
        context = ssl.create_default_context()

        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with server:
            if not self.use_ssl:
                server.ehlo()
                if self.use_tls:
                    server.starttls(context=context)
                    server.ehlo()
            if self.username:
                server.login(self.username, self.password or "")
            refused = server.send_message(email_message)
            if refused:
                logger.warning(f"[SMTP] refused: {refused}")

        return email_message.get("Message-ID", "unknown")

    async def send(self, message: MailMessage) -> str:
        """
        Send a message through the SMTP relay

        Args:
            message: MailMessage to deliver

        Returns:
            Message-ID of the sent message

        Raises:
            DeliveryError: on timeout, authentication failure, refused
                recipient or any other SMTP / network error
        """
        email_message = self.build_email_message(message)

        logger.info(
            f"[SMTP] sending: to={message.recipient} subject={message.subject} "
            f"via={self.host}:{self.port} ssl={self.use_ssl} tls={self.use_tls}"
        )

        try:
            message_id = await asyncio.wait_for(
                asyncio.to_thread(self._send_sync, email_message),
                timeout=self.timeout + self.grace,
            )
        except asyncio.TimeoutError as e:
            waited = self.timeout + self.grace
            logger.error(f"[SMTP] timed out after {waited}s to={message.recipient}")
            raise DeliveryError(
                "Mail relay did not respond in time", reason=f"timeout after {waited}s"
            ) from e
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"[SMTP] authentication rejected by {self.host}: {e}")
            raise DeliveryError("Mail relay rejected the credentials", reason=str(e)) from e
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"[SMTP] recipient refused to={message.recipient}: {e}")
            raise DeliveryError("Mail relay refused the recipient", reason=str(e)) from e
        except (smtplib.SMTPException, OSError) as e:
            logger.exception(f"[SMTP] send failed to={message.recipient}")
            raise DeliveryError("Mail relay unreachable or send failed", reason=str(e)) from e

        logger.info(f"[SMTP] sent ok to={message.recipient} msg_id={message_id}")
        return message_id


def create_mail_service(config) -> MailService:
    """
    Factory function to create the configured mail service

    Args:
        config: ApplicationConfig-like object. SMTP is used when SMTP_HOST
            is set, otherwise messages are only logged.

    Returns:
        Configured MailService
    """
    if not getattr(config, "SMTP_HOST", None):
        return LoggingMailService()

    return SmtpMailService(
        host=config.SMTP_HOST,
        port=int(config.SMTP_PORT),
        from_email=config.MAIL_FROM,
        from_name=config.MAIL_FROM_NAME,
        username=config.SMTP_USERNAME or None,
        password=config.SMTP_PASSWORD or None,
        use_ssl=bool(config.SMTP_USE_SSL),
        use_tls=bool(config.SMTP_USE_TLS),
        timeout=float(config.SMTP_TIMEOUT_SECONDS),
        grace=float(getattr(config, "SMTP_TIMEOUT_GRACE_SECONDS", 1)),
    )
