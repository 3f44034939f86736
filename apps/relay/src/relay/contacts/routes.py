"""Contacts intake route.

POST /contact accepts a JSON array of ``{"phone": "..."}`` objects and
forwards it unchanged to the dialer's contacts-upload webhook.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel

from relay.clients.dialer import DialerClient, get_dialer_client
from relay.config import RelaySettings, get_settings
from relay.errors import ValidationError
from relay.security.tokens import bearer, check_token, extract_token

logger = logging.getLogger("lead-relay-api")

router = APIRouter(tags=["Contacts"])


class ContactsRelayResponse(BaseModel):
    """Contacts accepted by the dialer."""

    success: bool = True
    message: str
    count: int
    dialerResponse: Any = None


def _is_valid_contact(contact: Any) -> bool:
    return (
        isinstance(contact, dict)
        and isinstance(contact.get("phone"), str)
        and bool(contact["phone"])
    )


def parse_contacts(raw_body: bytes) -> list[dict]:
    """Decode and validate the contacts array."""
    try:
        contacts = json.loads(raw_body) if raw_body.strip() else None
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Request body is not valid JSON") from e

    if not isinstance(contacts, list):
        raise ValidationError(
            'Body must be a JSON array: [{"phone": "79001234567"}, ...]'
        )
    if not contacts:
        raise ValidationError("Contacts array is empty")

    invalid_count = sum(1 for c in contacts if not _is_valid_contact(c))
    if invalid_count:
        raise ValidationError(
            'Invalid contacts. Each contact must have a string "phone" field',
            invalidCount=invalid_count,
        )
    return contacts


@router.post("/contact", response_model=ContactsRelayResponse)
async def receive_contacts(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    settings: RelaySettings = Depends(get_settings),
    dialer: DialerClient = Depends(get_dialer_client),
):
    """Validate and forward contacts to the dialer."""
    check_token(extract_token(request, credentials), settings.contact_secret_token)

    contacts = parse_contacts(await request.body())
    logger.info(f"Received {len(contacts)} contact(s)")

    result = await dialer.upload_contacts(contacts)

    return ContactsRelayResponse(
        message=f"Forwarded {len(contacts)} contact(s) to the dialer",
        count=len(contacts),
        dialerResponse=result.payload,
    )
