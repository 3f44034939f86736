"""Webhook routes.

- POST /webhook: signed call-center webhook -> Bitrix lead
- POST /test/bitrix/lead: same pipeline without signature check, for manual
  testing outside production
"""

from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel

from relay.config import RelaySettings, get_settings
from relay.webhooks.pipeline import LeadRelay, get_lead_relay, parse_document

router = APIRouter(tags=["Webhooks"])


# =============================================================================
# Response Models
# =============================================================================


class LeadRelayResponse(BaseModel):
    """Lead successfully created in Bitrix."""

    success: bool = True
    message: str
    leadId: Any
    data: dict


class ErrorResponse(BaseModel):
    """Failure envelope for every relay error."""

    success: bool = False
    error: str


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def require_test_routes(settings: RelaySettings = Depends(get_settings)) -> None:
    """Hide test routes in production."""
    if not settings.test_routes_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


# =============================================================================
# Routes
# =============================================================================


@router.post(
    "/webhook",
    response_model=LeadRelayResponse,
    responses=ERROR_RESPONSES,
)
async def receive_webhook(
    request: Request,
    x_webhook_signature: str | None = Header(default=None),
    relay: LeadRelay = Depends(get_lead_relay),
):
    """Verify, map and forward a call-center webhook to Bitrix.

    The body is read as raw bytes so the signature covers exactly what was
    sent.
    """
    raw_body = await request.body()
    outcome = await relay.handle_webhook(raw_body, x_webhook_signature)

    return LeadRelayResponse(
        message="Lead created in Bitrix",
        leadId=outcome.lead_id,
        data=outcome.upstream_payload,
    )


@router.post(
    "/test/bitrix/lead",
    response_model=LeadRelayResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_test_routes)],
)
async def create_test_lead(
    request: Request,
    relay: LeadRelay = Depends(get_lead_relay),
):
    """Create a lead from a webhook-shaped body without signature check."""
    document = parse_document(await request.body())
    outcome = await relay.handle_document(document)

    return LeadRelayResponse(
        message="Test lead created in Bitrix",
        leadId=outcome.lead_id,
        data=outcome.upstream_payload,
    )
