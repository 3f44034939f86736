"""Lead relay pipeline.

One pass per inbound webhook:

    RECEIVED -> VALIDATED -> MAPPED -> FORWARDED -> RESPONDED

Authentication and validation failures reject the request before any
mapping or upstream call. Mapping and upstream failures fail it afterwards.
There is no retry and no deduplication.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import Depends
from lead_mapping import LEAD_MAPPING, FieldSpec, apply_mapping_with_report

from relay.clients.bitrix import BitrixClient, get_bitrix_client
from relay.config import RelaySettings, get_settings
from relay.errors import AuthError, MappingError, RelayError, ValidationError
from relay.security.signature import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger("lead-relay-webhook")

REQUIRED_SECTIONS = ("contact", "call")


class RelayStage(str, Enum):
    """Pipeline stage reached by a request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    MAPPED = "mapped"
    FORWARDED = "forwarded"
    RESPONDED = "responded"


@dataclass
class LeadRelayOutcome:
    """Successful relay of one webhook."""

    lead_id: Any
    upstream_payload: dict
    fields: dict[str, Any]
    skipped: dict[str, str]


def parse_document(raw_body: bytes) -> dict:
    """Decode the raw body into a non-empty JSON object."""
    if not raw_body or not raw_body.strip():
        raise ValidationError("Request body is empty")

    try:
        document = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Request body is not valid JSON: {e.msg}") from e
    except UnicodeDecodeError as e:
        raise ValidationError("Request body is not valid UTF-8") from e

    if not isinstance(document, dict) or not document:
        raise ValidationError("No data provided. Send a JSON object in the request body")
    return document


def validate_document(document: Mapping[str, Any]) -> None:
    """Require the contact and call sections."""
    missing = [key for key in REQUIRED_SECTIONS if not document.get(key)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class LeadRelay:
    """Relays call-center webhooks into Bitrix leads."""

    def __init__(
        self,
        settings: RelaySettings,
        bitrix: BitrixClient,
        table: Mapping[str, FieldSpec] = LEAD_MAPPING,
    ):
        self.settings = settings
        self.bitrix = bitrix
        self.table = table

    def authenticate(self, raw_body: bytes, signature: str | None) -> None:
        """Check the HMAC signature when a secret is configured."""
        if not self.settings.signature_required:
            return
        if not signature:
            raise AuthError(f"Missing {SIGNATURE_HEADER} header")
        if not verify_signature(raw_body, signature, self.settings.webhook_secret):
            raise AuthError("Invalid webhook signature")

    def map_fields(self, document: Mapping[str, Any]) -> tuple[dict, dict]:
        """Apply the lead table; at least one field must survive."""
        report = apply_mapping_with_report(document, self.table)
        if report.skipped:
            logger.warning(f"Skipped fields: {', '.join(sorted(report.skipped))}")
        if report.is_empty:
            raise MappingError("Mapping produced no fields to send to Bitrix")
        logger.info(f"Mapped fields: {', '.join(report.fields)}")
        return report.fields, report.skipped

    async def handle_webhook(self, raw_body: bytes, signature: str | None) -> LeadRelayOutcome:
        """Full pipeline for a signed webhook."""
        logger.info(
            f"Webhook received: {len(raw_body)} bytes, "
            f"signature {'present' if signature else 'absent'}"
        )
        self.authenticate(raw_body, signature)
        return await self.handle_document(parse_document(raw_body))

    async def handle_document(self, document: Mapping[str, Any]) -> LeadRelayOutcome:
        """Pipeline from validation onward, for an already-trusted document."""
        stage = RelayStage.RECEIVED
        try:
            validate_document(document)
            stage = RelayStage.VALIDATED

            fields, skipped = self.map_fields(document)
            stage = RelayStage.MAPPED

            result = await self.bitrix.add_lead(fields)
            stage = RelayStage.FORWARDED
        except RelayError as e:
            logger.error(f"Relay stopped after stage {stage.value}: {e.message}")
            raise

        logger.info(f"Lead {result.lead_id} created ({RelayStage.RESPONDED.value})")
        return LeadRelayOutcome(
            lead_id=result.lead_id,
            upstream_payload=result.payload,
            fields=fields,
            skipped=skipped,
        )


def get_lead_relay(
    settings: RelaySettings = Depends(get_settings),
    bitrix: BitrixClient = Depends(get_bitrix_client),
) -> LeadRelay:
    """Build the relay for a request."""
    return LeadRelay(settings=settings, bitrix=bitrix)
