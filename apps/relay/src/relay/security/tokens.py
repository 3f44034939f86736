"""Shared-token access check for the contacts endpoint."""

import hmac

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from relay.errors import AuthError, ForbiddenError

TOKEN_QUERY_PARAM = "token"
TOKEN_HEADER = "X-Auth-Token"

# Missing credentials are reported as AuthError by check_token
bearer = HTTPBearer(auto_error=False)


def extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None = None
) -> str | None:
    """Read the token from ?token=, a Bearer Authorization header or X-Auth-Token."""
    token = request.query_params.get(TOKEN_QUERY_PARAM)
    if token:
        return token

    if credentials is not None and credentials.credentials.strip():
        return credentials.credentials.strip()

    return request.headers.get(TOKEN_HEADER) or None


def check_token(provided: str | None, expected: str) -> None:
    """Raise unless the provided token matches. No-op when no token is configured."""
    if not expected:
        return
    if not provided:
        raise AuthError(
            "Missing access token. Pass it as ?token=..., "
            "'Authorization: Bearer <token>' or X-Auth-Token"
        )
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise ForbiddenError("Invalid access token")
