"""
Notification Service — best-effort transactional email dispatch.
Nothing in here raises: every attempt ends in a DispatchOutcome that the
caller may log or ignore, but never turns into an HTTP error.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from invoicebolt.config import Settings
from invoicebolt.services import email_templates
from invoicebolt.services.documents import render_invoice_csv, render_invoice_html, sample_invoice
from invoicebolt.services.mailer import EmailAttachment, EmailTransport, OutgoingEmail

logger = logging.getLogger("invoicebolt.notifications")


class DispatchStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchOutcome:
    status: DispatchStatus
    error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status is DispatchStatus.SENT


class NotificationService:
    """Composes and sends launch emails through an EmailTransport."""

    def __init__(self, settings: Settings, transport: EmailTransport):
        self.settings = settings
        self.transport = transport

    def dispatch(self, kind: str, to: str, compose: Callable[[], OutgoingEmail]) -> DispatchOutcome:
        """Attempt one delivery; composition errors count as failures too."""
        if not self.transport.configured():
            logger.debug(f"[EMAIL] transport not configured, skipping {kind} for {to}")
            return DispatchOutcome(DispatchStatus.SKIPPED)

        try:
            self.transport.send(compose())
        except Exception as e:
            logger.error(f"[EMAIL] {kind} to {to} failed: {e}", exc_info=True)
            return DispatchOutcome(DispatchStatus.FAILED, error=str(e))

        logger.info(f"[EMAIL] {kind} sent to {to}")
        return DispatchOutcome(DispatchStatus.SENT)

    def send_payment_confirmed(
        self,
        to: str,
        first_name: Optional[str],
        order_id: str,
        amount: str,
        payment_method: str,
        paid_at: str,
    ) -> DispatchOutcome:
        return self.dispatch(
            "payment_confirmed",
            to,
            lambda: email_templates.payment_confirmed_email(
                self.settings, to, first_name, order_id, amount, payment_method, paid_at,
            ),
        )

    def send_reservation(self, to: str, first_name: Optional[str]) -> DispatchOutcome:
        return self.dispatch(
            "reservation",
            to,
            lambda: email_templates.reservation_email(self.settings, to, first_name),
        )

    def send_template_resource(self, to: str, first_name: Optional[str]) -> DispatchOutcome:
        def compose() -> OutgoingEmail:
            invoice = sample_invoice(self.settings)
            attachments = [
                EmailAttachment("invoicebolt-sample-invoice.html", render_invoice_html(invoice), "text/html"),
                EmailAttachment("invoicebolt-sample-invoice.csv", render_invoice_csv(invoice), "text/csv"),
            ]
            return email_templates.template_resource_email(self.settings, to, first_name, attachments)

        return self.dispatch("template_resource", to, compose)
