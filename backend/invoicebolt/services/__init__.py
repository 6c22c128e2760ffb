from invoicebolt.services.gateway import RazorpayGateway, GatewayOrder
from invoicebolt.services.mailer import SmtpTransport, EmailTransport, OutgoingEmail, EmailAttachment
from invoicebolt.services.notification_service import NotificationService, DispatchOutcome, DispatchStatus
from invoicebolt.services.payment_service import PaymentService
from invoicebolt.services.lead_service import LeadService

__all__ = [
    "RazorpayGateway", "GatewayOrder",
    "SmtpTransport", "EmailTransport", "OutgoingEmail", "EmailAttachment",
    "NotificationService", "DispatchOutcome", "DispatchStatus",
    "PaymentService", "LeadService",
]
