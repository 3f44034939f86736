"""Bitrix24 inbound-webhook client.

The base URL of a Bitrix inbound webhook embeds its access token
(https://<portal>/rest/<user>/<token>/), so the URL is never logged or
included in error messages.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Depends

from relay.config import RelaySettings, get_settings
from relay.errors import ConfigurationError, UpstreamError

logger = logging.getLogger("lead-relay-bitrix")

LEAD_ADD_METHOD = "crm.lead.add"


def build_method_url(base_url: str, method: str) -> str:
    """Join base URL and method with exactly one separating slash."""
    if base_url.endswith("/"):
        return f"{base_url}{method}"
    return f"{base_url}/{method}"


@dataclass
class LeadResult:
    """Result of a successful crm.lead.add call."""

    lead_id: Any
    payload: dict


class BitrixClient:
    """Minimal Bitrix24 REST client for lead creation."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            webhook_url: Inbound-webhook base URL.
            timeout: Seconds to wait for Bitrix before giving up.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def call(self, method: str, payload: dict) -> dict:
        """POST a JSON payload to a REST method and return the decoded body.

        Raises:
            ConfigurationError: No webhook URL configured.
            UpstreamError: Network failure, timeout, non-2xx status, non-JSON
                body, or an ``error`` field in the response.
        """
        if not self.is_configured():
            raise ConfigurationError("BITRIX_WEBHOOK_URL is not configured")

        url = build_method_url(self.webhook_url, method)
        logger.info(f"Calling Bitrix method {method}")

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Bitrix {method} timed out after {self.timeout}s")
            raise UpstreamError(
                f"Bitrix did not respond within {self.timeout:g} seconds"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Bitrix {method} request failed: {type(e).__name__}: {e}")
            raise UpstreamError(
                f"Could not reach Bitrix ({type(e).__name__})"
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            detail = _error_detail(body) or f"HTTP {response.status_code}"
            logger.error(
                f"Bitrix {method} returned HTTP {response.status_code}: {detail}"
            )
            raise UpstreamError(f"Bitrix error: {detail}")

        if not isinstance(body, dict):
            logger.error(f"Bitrix {method} returned a non-JSON body")
            raise UpstreamError("Bitrix returned an unexpected response")

        if body.get("error"):
            detail = _error_detail(body)
            logger.error(f"Bitrix {method} returned error: {detail}")
            raise UpstreamError(f"Bitrix error: {detail}")

        return body

    async def add_lead(self, fields: dict[str, Any]) -> LeadResult:
        """Create a lead from a flat field map."""
        body = await self.call(LEAD_ADD_METHOD, {"fields": fields})
        lead_id = body.get("result")
        logger.info(f"Bitrix lead created: {lead_id}")
        return LeadResult(lead_id=lead_id, payload=body)


def _error_detail(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    description = body.get("error_description")
    error = body.get("error")
    if description:
        return str(description)
    if error:
        return str(error)
    return None


def get_bitrix_client(settings: RelaySettings = Depends(get_settings)) -> BitrixClient:
    """Build the Bitrix client from settings."""
    return BitrixClient(
        webhook_url=settings.bitrix_webhook_url,
        timeout=settings.upstream_timeout,
    )
