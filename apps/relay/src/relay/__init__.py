"""Call-center webhook relay.

This FastAPI application:
- Verifies signed call-center webhooks (POST /webhook)
- Maps them into Bitrix lead fields (using lead_mapping)
- Creates the lead via crm.lead.add
"""

from relay.main import app

__all__ = ["app"]
