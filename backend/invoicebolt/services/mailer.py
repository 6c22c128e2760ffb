"""
Email Transport — SMTP delivery of composed messages.
"""
import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Dict, List, Optional

from invoicebolt.config import Settings

logger = logging.getLogger("invoicebolt.mailer")


@dataclass(frozen=True)
class EmailAttachment:
    filename: str
    content: bytes
    mime_type: str = "application/octet-stream"


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str
    text: str
    attachments: List[EmailAttachment] = field(default_factory=list)
    reply_to: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


class EmailTransport:
    """Interface every transport implements."""

    def configured(self) -> bool:
        raise NotImplementedError

    def send(self, message: OutgoingEmail) -> None:
        """Deliver the message or raise."""
        raise NotImplementedError


class SmtpTransport(EmailTransport):
    """SMTP over implicit TLS on port 465, STARTTLS on any other port."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def configured(self) -> bool:
        return self.settings.email_enabled

    def build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.FROM_EMAIL
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg["Message-ID"] = make_msgid(domain="invoicebolt")
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        for name, value in message.headers.items():
            msg[name] = value

        msg.set_content(message.text)
        msg.add_alternative(message.html, subtype="html")

        for attachment in message.attachments:
            maintype, _, subtype = attachment.mime_type.partition("/")
            msg.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return msg

    def send(self, message: OutgoingEmail) -> None:
        if not self.configured():
            raise RuntimeError("SMTP not configured. Set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS")

        msg = self.build_message(message)
        host, port = self.settings.SMTP_HOST, self.settings.SMTP_PORT
        timeout = self.settings.SMTP_TIMEOUT_SECONDS
        context = ssl.create_default_context()

        if port == 465:
            with smtplib.SMTP_SSL(host, port, timeout=timeout, context=context) as smtp:
                smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASS)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(host, port, timeout=timeout) as smtp:
                smtp.starttls(context=context)
                smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASS)
                smtp.send_message(msg)

        logger.info(f"Sent '{message.subject}' to {message.to}")
