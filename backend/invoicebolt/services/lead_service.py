"""
Lead Service — landing page email capture.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from invoicebolt.services.notification_service import DispatchOutcome, NotificationService
from invoicebolt.store.base import RecordStore
from invoicebolt.store.records import LeadRecord

logger = logging.getLogger("invoicebolt.leads")


@dataclass(frozen=True)
class SubscribeResult:
    lead: Optional[LeadRecord]        # None for trapped bot submissions
    created: bool
    notification: Optional[DispatchOutcome] = None


class LeadService:
    def __init__(self, store: RecordStore, notifications: NotificationService):
        self.store = store
        self.notifications = notifications

    def subscribe(
        self,
        email: str,
        utms: Optional[str] = None,
        first_name: Optional[str] = None,
        wants_template: bool = False,
        is_bot: bool = False,
    ) -> SubscribeResult:
        """Store a lead once per email and send the matching welcome email.

        ``email`` must already be validated and normalized. Bot submissions
        are acknowledged without touching the store or the mailer.
        """
        if is_bot:
            logger.info("Honeypot triggered, dropping lead submission")
            return SubscribeResult(lead=None, created=False)

        lead, created = self.store.create_lead(email, utms)
        if created:
            logger.info(f"New lead {email}")
        else:
            logger.debug(f"Lead {email} already registered")

        if wants_template:
            outcome = self.notifications.send_template_resource(email, first_name)
        else:
            outcome = self.notifications.send_reservation(email, first_name)
        return SubscribeResult(lead=lead, created=created, notification=outcome)
