"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the listing store and search engine.
"""

from __future__ import annotations

from functools import lru_cache

from tripmarket.adapters import SQLiteListingStore, create_listing_store
from tripmarket.config import get_settings
from tripmarket.domains.search import ListingStore, RelevanceSearchEngine


@lru_cache
def get_listing_store() -> ListingStore:
    """Get listing store singleton."""
    return create_listing_store(get_settings())


@lru_cache
def get_search_engine() -> RelevanceSearchEngine:
    """Get search engine singleton."""
    settings = get_settings()
    return RelevanceSearchEngine(
        get_listing_store(),
        fetch_timeout=settings.search_fetch_timeout,
        max_results=settings.search_max_results,
    )


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    store = get_listing_store()
    if isinstance(store, SQLiteListingStore):
        await store.initialize()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    if get_listing_store.cache_info().currsize:
        store = get_listing_store()
        close = getattr(store, "close", None)
        if close is not None:
            await close()
