"""
Lead Routes — waitlist signup from the landing page.
"""
from fastapi import APIRouter, Depends

from invoicebolt.dependencies import get_lead_service
from invoicebolt.schemas.schemas import LeadSubscribeRequest, LeadSubscribeResponse, ErrorResponse
from invoicebolt.services.lead_service import LeadService
from invoicebolt.utils.rate_limiter import rate_limit

router = APIRouter(prefix="/api/leads", tags=["Leads"])


@router.post(
    "/subscribe",
    response_model=LeadSubscribeResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def subscribe(
    payload: LeadSubscribeRequest,
    service: LeadService = Depends(get_lead_service),
    _throttle: bool = Depends(rate_limit("leads", "LEAD_RATE_LIMIT")),
):
    """Join the launch list. Always answers with the same success shape."""
    service.subscribe(
        email=payload.email,
        utms=payload.utms,
        first_name=payload.first_name,
        wants_template=payload.wants_template,
        is_bot=payload.is_bot,
    )
    return LeadSubscribeResponse()
