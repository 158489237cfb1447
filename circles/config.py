"""Settings for the circles service.

Values come from environment variables, then from an optional JSON file
named by CONFIG_FILE, then from the defaults below.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from circles.models.taxonomy import Locale

logger = logging.getLogger(__name__)


def flatten_json_config(config: dict[str, Any]) -> dict[str, Any]:
    """Merge nested sections into one flat mapping.

    Section names are only for grouping, so
    {"redis": {"redis_host": "cache"}, "display": {"default_locale": "fr"}}
    flattens to {"redis_host": "cache", "default_locale": "fr"}.
    Underscore-prefixed keys are annotations and are dropped.
    """
    flat: dict[str, Any] = {}
    for name, entry in config.items():
        if name.startswith("_"):
            continue
        flat.update(flatten_json_config(entry) if isinstance(entry, dict) else {name: entry})
    return flat


def load_json_config(config_file: Optional[str] = None) -> dict[str, Any]:
    """Read and flatten the JSON config file.

    Falls back to the CONFIG_FILE env var when no path is given. A missing
    or unreadable file is logged and treated as empty.
    """
    location = config_file or os.getenv("CONFIG_FILE")
    if not location:
        return {}

    path = Path(location)
    if not path.is_file():
        logger.warning(f"[Config] No config file at {location}, using env and defaults")
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"[Config] Ignoring config file {location}: {e}")
        return {}

    logger.info(f"[Config] Loaded {location}")
    return flatten_json_config(raw)


class Settings(BaseSettings):
    """Service configuration (env > JSON file > defaults)."""

    # Event document store
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # HTTP
    server_port: int = 8080
    log_level: str = "INFO"

    # Display
    default_locale: Locale = Locale.EN

    # Events stored with separate date and time fields are in this zone
    event_timezone: str = "America/Toronto"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        # Init kwargs outrank env vars in pydantic-settings, so file values
        # that an env var also sets are left out
        file_values = {
            key: value for key, value in load_json_config().items()
            if os.getenv(key.upper()) is None
        }
        super().__init__(**{**file_values, **kwargs})

    @field_validator("event_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.event_timezone)

    @property
    def redis_address(self) -> str:
        return f"{self.redis_host}:{self.redis_port}"
