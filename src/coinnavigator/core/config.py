"""Configuration management for CoinNavigator.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once per process
and is immutable during runtime.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = f"sqlite:///{Path.home() / 'coins.db'}"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (prefixed with
    ``COINNAV_``) and .env files. All values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COINNAV_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "CoinNavigator"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "production"
    debug: bool = False

    # Database Settings
    database_url: str = DEFAULT_DATABASE_URL
    db_echo: bool = False

    # SQLite Pragmas
    db_sqlite_journal_mode: str = "WAL"
    db_sqlite_synchronous: str = "NORMAL"
    db_sqlite_busy_timeout: int = 5000  # 5 seconds
    db_sqlite_foreign_keys: bool = True

    # Extra protected collections created on every startup, in addition to
    # "Owned" and "Wishlist" which always exist.
    default_collections: list[str] = Field(default_factory=list)

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "console"] = "console"

    @field_validator("default_collections", mode="before")
    @classmethod
    def parse_default_collections(cls, v: str | list[str]) -> list[str]:
        """Parse default collections from a comma-separated string or list."""
        if isinstance(v, str):
            v = [name.strip() for name in v.split(",")]
        return [name for name in v if name]

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only SQLite databases are supported."""
        if not v.startswith("sqlite"):
            raise ValueError("database_url must be a SQLite URL (sqlite:///path/to/file.db)")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_sqlite_memory(self) -> bool:
        """Check if the database lives in memory (no file path)."""
        return self.database_url in ("sqlite://", "sqlite:///:memory:")

    @property
    def database_path(self) -> Path | None:
        """Filesystem path of the SQLite database, or None for in-memory."""
        if self.is_sqlite_memory:
            return None
        return Path(self.database_url.split(":///")[-1])


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and reused so every component sees the same
    configuration.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
