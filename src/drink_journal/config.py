"""Application configuration."""

import logging
import os
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["local", "supabase"] = "local"
    local_store_path: str = "drink_records.json"
    supabase_url: str | None = None
    supabase_key: str | None = None
    supabase_table: str = "drink_records"
    supabase_user_id: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    suggestion_debounce_seconds: float = 0.4
    suggestion_cache_ttl_seconds: int = 3600
    timezone: str = "UTC"
    api_token: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(name: str | None) -> str:
    """Return a valid IANA timezone name, falling back to UTC."""
    if not name or not name.strip():
        return "UTC"
    cleaned = name.strip()
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.warning("Unknown timezone %r, using UTC", cleaned)
        return "UTC"
    return cleaned
