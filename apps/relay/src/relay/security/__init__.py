"""Request authentication.

- HMAC-SHA256 webhook signatures
- Shared access token for the contacts endpoint
"""

from relay.security.signature import (
    SIGNATURE_HEADER,
    compute_signature,
    verify_signature,
)
from relay.security.tokens import bearer, check_token, extract_token

__all__ = [
    "SIGNATURE_HEADER",
    "bearer",
    "check_token",
    "compute_signature",
    "extract_token",
    "verify_signature",
]
