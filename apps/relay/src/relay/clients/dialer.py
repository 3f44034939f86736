"""Call-center dialer contacts-upload client.

Forwards phone contacts to the dialer's integration webhook so they are
queued for calling.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import Depends

from relay.config import RelaySettings, get_settings
from relay.errors import ConfigurationError, UpstreamError

logger = logging.getLogger("lead-relay-dialer")


@dataclass
class UploadResult:
    """Result of a contacts upload."""

    status_code: int
    payload: Any


class DialerClient:
    """Uploads contacts to the dialer platform."""

    def __init__(
        self,
        contacts_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.contacts_url = contacts_url
        self.timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.contacts_url)

    async def upload_contacts(self, contacts: list[dict]) -> UploadResult:
        """POST the contacts list as-is.

        Raises:
            ConfigurationError: No contacts URL configured.
            UpstreamError: Network failure, timeout or non-2xx status.
        """
        if not self.is_configured():
            raise ConfigurationError("DIALER_CONTACTS_URL is not configured")

        logger.info(f"Uploading {len(contacts)} contact(s) to dialer")

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(self.contacts_url, json=contacts)
        except httpx.TimeoutException as e:
            logger.error(f"Dialer upload timed out after {self.timeout}s")
            raise UpstreamError(
                f"Dialer did not respond within {self.timeout:g} seconds"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Dialer upload failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"Could not reach dialer ({type(e).__name__})") from e

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        if not response.is_success:
            message = payload.get("message") if isinstance(payload, dict) else None
            detail = message or f"HTTP {response.status_code}"
            logger.error(f"Dialer upload returned HTTP {response.status_code}: {detail}")
            raise UpstreamError(f"Dialer error: {detail}")

        logger.info(f"Dialer accepted contacts with HTTP {response.status_code}")
        return UploadResult(status_code=response.status_code, payload=payload)


def get_dialer_client(settings: RelaySettings = Depends(get_settings)) -> DialerClient:
    """Build the dialer client from settings."""
    return DialerClient(
        contacts_url=settings.dialer_contacts_url,
        timeout=settings.upstream_timeout,
    )
