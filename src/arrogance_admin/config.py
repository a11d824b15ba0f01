"""Application configuration."""

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_USER_CONFIG_ENV = Path.home() / ".config" / "arrogance" / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    users_table: str = "users"
    page_size: int = 3
    log_level: str = "INFO"
    log_file: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(_USER_CONFIG_ENV, f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("page_size")
    @classmethod
    def _page_size_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("page_size must be positive")
        return value
