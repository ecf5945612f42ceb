"""
Relevance Search Engine - Multi-category fuzzy search with merged ranking.

Features:
- Concurrent per-category fetch with a per-category timeout
- Weighted multi-field fuzzy scoring (see categories)
- Stable sort by relevance, price, rating, recency or popularity
- Offset/limit pagination over the fully sorted set
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .categories import (
    MAX_RESULTS,
    SEARCH_TYPE_CATEGORIES,
    ListingSearch,
    as_number,
    default_category_searches,
    price_of,
)
from .contracts import ListingStore
from .models import Category, FilterSet, SearchRequest, SearchResult, SortMode
from .scoring import tokenize
from .suggestions import get_popular_searches, get_suggestions

logger = logging.getLogger(__name__)

__all__ = ["RelevanceSearchEngine", "sort_results"]

DEFAULT_FETCH_TIMEOUT = 5.0

_TIMESTAMP = TypeAdapter(datetime)


def _created_at(result: SearchResult) -> float:
    """Creation time as a POSIX timestamp; missing or unreadable is the epoch."""
    value = result.data.get("created_at")
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value:
        try:
            moment = _TIMESTAMP.validate_python(value)
        except ValidationError:
            return 0.0
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Numeric timestamps are milliseconds, as JavaScript clients store them
        return float(value) / 1000
    else:
        return 0.0

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def _popularity(result: SearchResult) -> float:
    return as_number(result.data.get("review_count")) * as_number(result.data.get("rating"))


# (sort key, descending)
_SORT_KEYS: dict[SortMode, tuple[Callable[[SearchResult], float], bool]] = {
    SortMode.RELEVANCE: (lambda r: r.score, True),
    SortMode.PRICE_LOW: (price_of, False),
    SortMode.PRICE_HIGH: (price_of, True),
    SortMode.RATING: (lambda r: as_number(r.data.get("rating")), True),
    SortMode.NEWEST: (_created_at, True),
    SortMode.POPULAR: (_popularity, True),
}


def sort_results(results: list[SearchResult], sort: SortMode) -> list[SearchResult]:
    """Stable sort; ties keep their merge order."""
    key, descending = _SORT_KEYS[sort]
    return sorted(results, key=key, reverse=descending)


class RelevanceSearchEngine:
    """
    Search across properties, tours, packages and transport.

    Stateless between calls: each search fetches fresh candidates from the
    store, ranks them in memory and discards them.

    Example:
        >>> engine = RelevanceSearchEngine(store)
        >>> results = await engine.search(SearchRequest(query="safari", type="tours"))
    """

    def __init__(
        self,
        store: ListingStore,
        fetch_timeout: float | None = DEFAULT_FETCH_TIMEOUT,
        max_results: int = MAX_RESULTS,
        searches: list[ListingSearch] | None = None,
    ) -> None:
        """
        Initialize search engine.

        Args:
            store: Listing data store
            fetch_timeout: Seconds allowed per category fetch (None disables)
            max_results: Row cap per category
            searches: Category searches in execution order (default: all four)
        """
        self._store = store
        self._fetch_timeout = fetch_timeout
        self._searches: list[tuple[Category, ListingSearch]] = [
            (s.category, s) for s in (searches or default_category_searches(max_results))
        ]

    async def search(self, request: SearchRequest) -> list[SearchResult]:
        """
        Execute search.

        Args:
            request: Query text, category selector, filters, sort and page

        Returns:
            One page of results; never raises for store failures
        """
        terms = tokenize(request.query)
        wanted = SEARCH_TYPE_CATEGORIES[request.type]
        selected = [search for category, search in self._searches if category in wanted]

        outcomes = await asyncio.gather(
            *(self._fetch_with_timeout(s, terms, request.filters) for s in selected),
            return_exceptions=True,
        )

        candidates: list[SearchResult] = []
        for search, outcome in zip(selected, outcomes):
            if isinstance(outcome, asyncio.TimeoutError):
                logger.warning(
                    "%s search timed out after %.1fs",
                    search.category.value,
                    self._fetch_timeout,
                )
            elif isinstance(outcome, Exception):
                logger.error("%s search failed: %s", search.category.value, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                candidates.extend(outcome)

        ranked = sort_results(candidates, request.sort)
        page = ranked[request.offset : request.offset + request.limit]

        logger.info(
            "Search: query='%s' type=%s sort=%s -> %d candidates, %d returned",
            request.query[:50],
            request.type.value,
            request.sort.value,
            len(candidates),
            len(page),
        )

        return page

    async def _fetch_with_timeout(
        self,
        search: ListingSearch,
        terms: list[str],
        filters: FilterSet,
    ) -> list[SearchResult]:
        fetch = search.fetch_candidates(self._store, terms, filters)
        if self._fetch_timeout is None or self._fetch_timeout <= 0:
            return await fetch
        return await asyncio.wait_for(fetch, timeout=self._fetch_timeout)

    async def get_suggestions(self, query: str, limit: int = 5) -> list[str]:
        """Autocomplete suggestions; see ``suggestions.get_suggestions``."""
        fetch = get_suggestions(self._store, query, limit)
        if self._fetch_timeout is None or self._fetch_timeout <= 0:
            return await fetch
        try:
            return await asyncio.wait_for(fetch, timeout=self._fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning("Suggestions timed out for '%s'", query[:50])
            return []

    @staticmethod
    def get_popular_searches() -> list[str]:
        """Fixed list of popular searches."""
        return get_popular_searches()

    def describe(self) -> dict[str, Any]:
        """Engine configuration, for health and diagnostics output."""
        return {
            "categories": [category.value for category, _ in self._searches],
            "fetch_timeout": self._fetch_timeout,
            "max_results": {c.value: s.max_results for c, s in self._searches},
        }
