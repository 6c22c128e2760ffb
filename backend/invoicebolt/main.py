"""
InvoiceBolt Launch API — FastAPI Application Entry Point

Wires the record store, payment gateway and mail transport into the
services, registers routers, error handlers and middleware.
"""
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoicebolt.config import Settings, get_settings
from invoicebolt.errors import InvoiceBoltError
from invoicebolt.logging_config import configure_logging
from invoicebolt.routes import leads_router, payment_router
from invoicebolt.schemas.schemas import HealthResponse
from invoicebolt.services.gateway import RazorpayGateway
from invoicebolt.services.lead_service import LeadService
from invoicebolt.services.mailer import EmailTransport, SmtpTransport
from invoicebolt.services.notification_service import NotificationService
from invoicebolt.services.payment_service import PaymentService
from invoicebolt.store import RecordStore, build_store
from invoicebolt.utils.rate_limiter import RateLimitExceeded, rate_limit_exceeded_handler

logger = logging.getLogger("invoicebolt")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer-when-downgrade",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Content-Security-Policy": "; ".join([
        "default-src 'self'",
        "img-src 'self' data: https:",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src 'self' https://fonts.gstatic.com",
        "script-src 'self' 'unsafe-inline' https://www.googletagmanager.com "
        "https://www.google-analytics.com https://checkout.razorpay.com",
        "connect-src 'self' https://www.google-analytics.com https://*.razorpay.com",
        "frame-src https://*.razorpay.com",
    ]),
}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field and message != "Invalid email" else message


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    gateway=None,
    transport: Optional[EmailTransport] = None,
) -> FastAPI:
    """Build the application. Collaborators default to the configured ones."""
    settings = settings or get_settings()
    configure_logging(settings)

    store = store or build_store(settings)
    gateway = gateway or RazorpayGateway(settings)
    transport = transport or SmtpTransport(settings)
    notifications = NotificationService(settings, transport)

    # ─── Application Instance ───────────────────────────────────────
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Pre-launch API for InvoiceBolt: waitlist capture, Razorpay lifetime-access "
            "checkout with signature verification, and transactional email."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.gateway = gateway
    app.state.notifications = notifications
    app.state.payment_service = PaymentService(settings, store, gateway, notifications)
    app.state.lead_service = LeadService(store, notifications)
    app.state.boot_time = time.time()

    # ─── Startup / Shutdown ─────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        """Log boot info."""
        logger.info(
            f"\n{'='*60}\n"
            f"  {settings.APP_NAME} v{settings.APP_VERSION}\n"
            f"  STORE: {store.backend}\n"
            f"  PAYMENTS: {'[OK] Razorpay keys loaded' if settings.payments_enabled else '[!] Disabled'}\n"
            f"  EMAIL: {'[OK] SMTP configured' if transport.configured() else '[!] Disabled'}\n"
            f"  PRICE: {settings.price_label} ({settings.CURRENCY})\n"
            f"  DEBUG: {settings.DEBUG}\n"
            f"{'='*60}"
        )

    @app.on_event("shutdown")
    def on_shutdown():
        close = getattr(gateway, "close", None)
        if close is not None:
            close()

    # ─── Error Handlers ─────────────────────────────────────────────
    @app.exception_handler(InvoiceBoltError)
    async def invoicebolt_error_handler(request: Request, exc: InvoiceBoltError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": _validation_message(exc), "error_code": "VALIDATION_ERROR"},
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Server error", "error_code": "INTERNAL_ERROR"},
        )

    # ─── Middleware ─────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every API request with timing."""
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 1)

        if request.url.path.startswith("/api"):
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration}ms)")

        return response

    # ─── API Routers ────────────────────────────────────────────────
    app.include_router(payment_router)
    app.include_router(leads_router)

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    def health():
        """Configuration status of the store, payments and email."""
        return HealthResponse(
            status="healthy",
            version=settings.APP_VERSION,
            store=store.backend,
            payments="configured" if settings.payments_enabled else "disabled",
            email="configured" if transport.configured() else "disabled",
            uptime_seconds=round(time.time() - app.state.boot_time, 1),
        )

    return app


app = create_app()
