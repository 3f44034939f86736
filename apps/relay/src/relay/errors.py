"""Relay error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
return to the caller. Secrets and upstream URLs never go into ``message``.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class RelayError(Exception):
    """Base class for errors surfaced as ``{success: false, error}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(RelayError):
    """Missing or invalid webhook signature / access token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(RelayError):
    """Access token present but wrong."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(RelayError):
    """Malformed body or missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.extra = extra


class MappingError(RelayError):
    """Mapping produced no fields to submit."""


class UpstreamError(RelayError):
    """Network failure, non-2xx or application-level error from an upstream."""


class ConfigurationError(RelayError):
    """A required upstream is not configured."""


def error_envelope(message: str, **extra) -> dict:
    return {"success": False, "error": message, **extra}


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    extra = getattr(exc, "extra", {})
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, **extra),
    )
