"""Configuration management for rednext.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Only the command-line surface and the
catalog factory read it; catalogs themselves receive their storage location
as a constructor argument.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_data_dir() -> Path:
    """Return the per-user directory holding embedded collections.

    Follows ``$XDG_CONFIG_HOME`` when set, otherwise ``~/.config``.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "rednext"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDNEXT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "rednext"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # Storage Settings
    backend: Literal["sqlite", "http"] = "sqlite"
    data_dir: Path = Field(default_factory=default_data_dir)
    remote_url: str | None = None
    http_timeout: float | None = None

    # Server Settings
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "console"] = "console"

    @field_validator("remote_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize the remote base URL so paths can be appended directly."""
        if v is None:
            return v
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_remote_backend(self) -> "Settings":
        """The http backend cannot work without a base URL."""
        if self.backend == "http" and not self.remote_url:
            raise ValueError(
                "The http backend requires a remote URL. "
                "Set REDNEXT_REMOTE_URL or pass --url."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
