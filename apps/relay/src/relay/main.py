"""FastAPI application for the call-center -> Bitrix lead relay.

Provides:
- Signed webhook intake that creates Bitrix leads
- Unauthenticated test route for manual lead creation (non-production)
- Contacts forwarding to the dialer platform

Flow:
1. POST /webhook - Verify signature, validate, map fields, call crm.lead.add
2. POST /test/bitrix/lead - Same, without signature check
3. POST /contact - Forward phone contacts to the dialer
4. GET /health - Liveness and configuration summary
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from relay.config import RelaySettings, get_settings, startup_warnings
from relay.contacts.routes import router as contacts_router
from relay.errors import RelayError, error_envelope, relay_error_handler
from relay.webhooks.routes import router as webhooks_router

_project_root = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
)
load_dotenv(os.path.join(_project_root, ".env.local"))
load_dotenv()  # Also try default .env

logger = logging.getLogger("lead-relay-api")


# =============================================================================
# App Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings once and report insecure or incomplete configuration."""
    settings = get_settings()
    for warning in startup_warnings(settings):
        logger.warning(warning)
    logger.info(f"Lead relay started (environment={settings.environment})")
    yield


app = FastAPI(
    title="Call-Center Lead Relay",
    description="Relays call-center webhooks into Bitrix24 leads",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(RelayError, relay_error_handler)

app.include_router(webhooks_router)
app.include_router(contacts_router)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_envelope("Internal server error"))


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration. Bodies are never logged."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)"
    )
    return response


# =============================================================================
# Endpoints
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    environment: str
    signature_verification: bool
    bitrix_configured: bool
    dialer_configured: bool


@app.get("/health", response_model=HealthResponse)
async def health_check(settings: RelaySettings = Depends(get_settings)):
    """Health check endpoint. Reports configuration presence, never values."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.environment,
        signature_verification=settings.signature_required,
        bitrix_configured=bool(settings.bitrix_webhook_url),
        dialer_configured=bool(settings.dialer_contacts_url),
    )


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
