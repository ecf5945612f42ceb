"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Listing store: "supabase" (hosted PostgREST) or "sqlite" (local file)
    store_backend: str = "supabase"

    # Supabase / PostgREST
    supabase_url: str = ""
    supabase_key: str = ""
    store_retry_attempts: int = 2

    # Local SQLite store
    db_path: Path = Path("data/tripmarket.db")

    # Search
    search_fetch_timeout: float = 5.0
    search_max_results: int = 100
    search_default_limit: int = 20
    suggestion_limit: int = 5

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the API and CLI entry points."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
