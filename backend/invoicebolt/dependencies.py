"""
FastAPI dependencies — services wired once per app in create_app() and
handed to route handlers from app.state.
"""
from fastapi import Request

from invoicebolt.services.lead_service import LeadService
from invoicebolt.services.payment_service import PaymentService


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payment_service


def get_lead_service(request: Request) -> LeadService:
    return request.app.state.lead_service
