"""Call-center webhook -> Bitrix lead relay."""

from relay.webhooks.pipeline import (
    LeadRelay,
    LeadRelayOutcome,
    RelayStage,
    get_lead_relay,
    parse_document,
    validate_document,
)
from relay.webhooks.routes import router as webhooks_router

__all__ = [
    "LeadRelay",
    "LeadRelayOutcome",
    "RelayStage",
    "get_lead_relay",
    "parse_document",
    "validate_document",
    "webhooks_router",
]
