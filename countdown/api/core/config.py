"""Settings for the countdown API, read from the environment and ``.env``."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path.cwd() / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Admin session tokens: audience is the API key, signed with the secret
    shopify_api_key: str = Field(..., description="App API key")
    shopify_api_secret: str = Field(..., description="App API secret")

    database_url: str = Field(..., description="PostgreSQL DSN")
    database_ssl: Literal["disable", "prefer", "require"] = Field(
        default="prefer", description="asyncpg ssl mode"
    )
    run_migrations: bool = Field(default=True, description="Apply pending SQL on startup")

    public_cache_ttl: float = Field(
        default=30.0, gt=0, description="Seconds a shop's active timer list stays cached"
    )

    frontend_url: str = Field(default="http://localhost:3000", description="Admin UI origin")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    @field_validator("database_ssl", mode="before")
    @classmethod
    def lower_ssl_mode(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level in LOG_LEVELS:
            return level
        logger.warning(f"Unknown LOG_LEVEL {v!r}, using INFO")
        return "INFO"

    @property
    def cors_origins(self) -> list[str]:
        return [self.frontend_url]

    @property
    def is_development(self) -> bool:
        """API docs are only served in development."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
