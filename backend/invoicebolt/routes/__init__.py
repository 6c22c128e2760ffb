from invoicebolt.routes.payment import router as payment_router
from invoicebolt.routes.leads import router as leads_router

__all__ = ["payment_router", "leads_router"]
