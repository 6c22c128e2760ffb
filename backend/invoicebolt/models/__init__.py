from invoicebolt.models.payment import Payment
from invoicebolt.models.lead import Lead

__all__ = ["Payment", "Lead"]
