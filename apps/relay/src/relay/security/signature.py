"""Webhook signature verification.

The call-center platform signs each webhook with HMAC-SHA256 over the raw
request body and sends the hex digest in X-Webhook-Signature.
"""

import hashlib
import hmac

SIGNATURE_HEADER = "X-Webhook-Signature"


def compute_signature(payload: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the payload."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """Constant-time check of a supplied signature against the payload.

    Args:
        payload: Exact bytes received, before any JSON parsing.
        signature: Value of the signature header, if any.
        secret: Shared webhook secret.

    Returns:
        True only if the signature matches.
    """
    if not signature:
        return False
    expected = compute_signature(payload, secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.strip().encode("utf-8"))
