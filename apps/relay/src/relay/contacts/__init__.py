"""Contacts intake and forwarding to the dialer."""

from relay.contacts.routes import parse_contacts
from relay.contacts.routes import router as contacts_router

__all__ = ["contacts_router", "parse_contacts"]
