"""Relay configuration.

Loaded once from environment variables at process start. Missing optional
values do not fail startup; they produce warnings from startup_warnings().
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("lead-relay-config")

DEFAULT_PORT = 3333
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 30.0
PRODUCTION = "production"


def _env(key: str, default: str = "") -> str:
    return (os.getenv(key, default) or "").strip()


def _env_float(key: str, default: float) -> float:
    raw = _env(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"{key}={raw!r} is not a number, using {default}")
        return default


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{key}={raw!r} is not an integer, using {default}")
        return default


@dataclass(frozen=True)
class RelaySettings:
    """Read-only relay configuration."""

    port: int = DEFAULT_PORT
    bitrix_webhook_url: str = ""
    webhook_secret: str = ""
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    dialer_contacts_url: str = ""
    contact_secret_token: str = ""
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RelaySettings":
        """Load settings from environment variables."""
        port_key = "DOCKERPORT" if _env("DOCKERPORT") else "PORT"
        return cls(
            port=_env_int(port_key, DEFAULT_PORT),
            bitrix_webhook_url=_env("BITRIX_WEBHOOK_URL"),
            webhook_secret=_env("WEBHOOK_SECRET"),
            upstream_timeout=_env_float(
                "UPSTREAM_TIMEOUT_SECONDS", DEFAULT_UPSTREAM_TIMEOUT_SECONDS
            ),
            dialer_contacts_url=_env("DIALER_CONTACTS_URL"),
            contact_secret_token=_env("CONTACT_SECRET_TOKEN"),
            environment=_env("ENVIRONMENT", "development").lower(),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    @property
    def signature_required(self) -> bool:
        return bool(self.webhook_secret)

    @property
    def test_routes_enabled(self) -> bool:
        return not self.is_production


def startup_warnings(settings: RelaySettings) -> list[str]:
    """Collect warnings about insecure or incomplete configuration."""
    warnings = []
    if not settings.webhook_secret:
        warnings.append(
            "WEBHOOK_SECRET not set - webhook signature verification is disabled"
        )
    if not settings.bitrix_webhook_url:
        warnings.append("BITRIX_WEBHOOK_URL not set - leads cannot be created")
    if not settings.contact_secret_token:
        warnings.append(
            "CONTACT_SECRET_TOKEN not set - /contact accepts unauthenticated requests"
        )
    if not settings.dialer_contacts_url:
        warnings.append("DIALER_CONTACTS_URL not set - contacts cannot be forwarded")
    if settings.test_routes_enabled:
        warnings.append(
            f"ENVIRONMENT={settings.environment} - unauthenticated /test/bitrix/lead is enabled"
        )
    return warnings


_settings: RelaySettings | None = None


def get_settings() -> RelaySettings:
    """Get the settings singleton."""
    global _settings
    if _settings is None:
        _settings = RelaySettings.from_env()
    return _settings
