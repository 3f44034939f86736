"""Outbound HTTP clients for the CRM and the dialer platform."""

from relay.clients.bitrix import (
    LEAD_ADD_METHOD,
    BitrixClient,
    LeadResult,
    build_method_url,
    get_bitrix_client,
)
from relay.clients.dialer import DialerClient, UploadResult, get_dialer_client

__all__ = [
    "LEAD_ADD_METHOD",
    "BitrixClient",
    "DialerClient",
    "LeadResult",
    "UploadResult",
    "build_method_url",
    "get_bitrix_client",
    "get_dialer_client",
]
