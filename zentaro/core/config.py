"""Environment-driven configuration objects for the storefront."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from zentaro.core.constants import (
    DEFAULT_CART_SYNC_ATTEMPTS,
    DEFAULT_CART_SYNC_DELAY,
    DEFAULT_RATE_LIMIT,
    SUPPORTED_COUNTRY,
)
from zentaro.core.exceptions import ConfigurationException


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(slots=True)
class CartSyncConfig:
    attempts: int
    initial_delay: float


@dataclass(slots=True)
class Settings:
    database_url: str | None
    supported_country: str
    cart_sync: CartSyncConfig
    cors_origins: list[str] = field(default_factory=list)
    api_rate_limit: str = DEFAULT_RATE_LIMIT
    log_level: str = "INFO"
    skip_db_init: bool = False
    auth_token_secret: str | None = None

    @property
    def has_database(self) -> bool:
        return bool(self.database_url)


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    try:
        attempts = int(os.getenv("CART_SYNC_ATTEMPTS", str(DEFAULT_CART_SYNC_ATTEMPTS)))
        delay = float(os.getenv("CART_SYNC_DELAY", str(DEFAULT_CART_SYNC_DELAY)))
    except ValueError as exc:
        raise ConfigurationException(f"Invalid cart sync settings: {exc}") from exc

    if attempts < 1:
        raise ConfigurationException("CART_SYNC_ATTEMPTS must be at least 1")

    supported_country = os.getenv("SUPPORTED_COUNTRY", SUPPORTED_COUNTRY).strip()
    if not supported_country:
        raise ConfigurationException("SUPPORTED_COUNTRY must not be empty")

    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        supported_country=supported_country,
        cart_sync=CartSyncConfig(attempts=attempts, initial_delay=max(0.0, delay)),
        cors_origins=_split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:8080,http://localhost:8081")
        ),
        api_rate_limit=os.getenv("API_RATE_LIMIT", DEFAULT_RATE_LIMIT),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        skip_db_init=_str_to_bool(os.getenv("SKIP_DB_INIT")),
        auth_token_secret=os.getenv("AUTH_TOKEN_SECRET") or None,
    )
