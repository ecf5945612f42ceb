"""
Store Factory - Build the configured listing store.
"""

from __future__ import annotations

import logging

from tripmarket.config import ConfigurationError, Settings, get_settings

from .sqlite import SQLiteListingStore
from .supabase import SupabaseStore

logger = logging.getLogger(__name__)

__all__ = ["create_listing_store"]


def create_listing_store(settings: Settings | None = None) -> SupabaseStore | SQLiteListingStore:
    """
    Create the listing store selected by ``settings.store_backend``.

    Raises:
        ConfigurationError: unknown backend, or Supabase selected without URL/key
    """
    settings = settings or get_settings()
    backend = settings.store_backend.lower()

    if backend == "sqlite":
        logger.info("Using SQLite listing store at %s", settings.db_path)
        return SQLiteListingStore(settings.db_path)

    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_KEY must be set for the supabase store backend",
                details={"store_backend": backend},
            )
        logger.info("Using Supabase listing store at %s", settings.supabase_url)
        return SupabaseStore(
            settings.supabase_url,
            settings.supabase_key,
            timeout=settings.search_fetch_timeout,
            retry_attempts=settings.store_retry_attempts,
        )

    raise ConfigurationError(
        f"Unknown store backend: {settings.store_backend}",
        details={"store_backend": settings.store_backend},
    )
