"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/location-services"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    location_api_base_url: str
    location_api_key: str
    facilities_path: Optional[str] = None
    validation_delay_seconds: float = 0.1
    request_timeout_seconds: float = 10.0
    server_port: int = 8080


def _get_float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    base_url = (os.getenv("LOCATION_SERVICES_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    api_key = os.getenv("LOCATION_SERVICES_API_KEY", "")
    facilities_path = os.getenv("FACILITIES_PATH") or None
    validation_delay_seconds = _get_float_env("VALIDATION_DELAY_SECONDS", "0.1")
    request_timeout_seconds = _get_float_env("REQUEST_TIMEOUT_SECONDS", "10")
    try:
        server_port = int(os.getenv("PORT", "8080"))
    except ValueError as exc:
        raise ConfigError("PORT must be an integer") from exc

    if not api_key:
        logger.warning("LOCATION_SERVICES_API_KEY is not configured; location service requests will fail.")

    return Settings(
        location_api_base_url=base_url,
        location_api_key=api_key,
        facilities_path=facilities_path,
        validation_delay_seconds=validation_delay_seconds,
        request_timeout_seconds=request_timeout_seconds,
        server_port=server_port,
    )
