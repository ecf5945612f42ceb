"""
Suggestions - Autocomplete from listing titles and locations.
"""

from __future__ import annotations

import logging

from tripmarket.adapters.query import TableQuery

from .contracts import ListingStore

logger = logging.getLogger(__name__)

__all__ = ["MIN_SUGGESTION_LENGTH", "POPULAR_SEARCHES", "get_suggestions", "get_popular_searches"]

MIN_SUGGESTION_LENGTH = 2

POPULAR_SEARCHES: tuple[str, ...] = (
    "Beach resort",
    "Mountain lodge",
    "City apartment",
    "Safari tour",
    "Wine tasting",
    "Hiking adventure",
    "Luxury villa",
    "4x4 rental",
)


def _suggestion_queries(text: str, limit: int) -> list[TableQuery]:
    columns = ["title", "location"]
    return [
        TableQuery("properties")
        .select(*columns)
        .eq("is_published", True)
        .any_ilike(columns, text)
        .limit(limit),
        TableQuery("tours")
        .select(*columns)
        .eq("status", "approved")
        .any_ilike(columns, text)
        .limit(limit),
    ]


async def get_suggestions(store: ListingStore, query: str, limit: int = 5) -> list[str]:
    """
    Titles and locations containing ``query``, properties first, then tours.

    Queries shorter than two characters return nothing without touching the
    store. Store failures are logged and yield an empty list.
    """
    text = query.strip()
    if len(text) < MIN_SUGGESTION_LENGTH or limit <= 0:
        return []

    needle = text.lower()
    # dict keeps insertion order and drops repeats
    suggestions: dict[str, None] = {}

    try:
        for table_query in _suggestion_queries(text, limit):
            rows = await store.select(table_query)
            for row in rows or []:
                for column in ("title", "location"):
                    value = row.get(column)
                    if value and needle in value.lower():
                        suggestions.setdefault(value, None)
    except Exception as e:
        logger.error("Suggestions failed for '%s': %s", text[:50], e)
        return []

    return list(suggestions)[:limit]


def get_popular_searches() -> list[str]:
    """Fixed list of popular searches."""
    return list(POPULAR_SEARCHES)
