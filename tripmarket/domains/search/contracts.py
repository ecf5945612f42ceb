"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from tripmarket.adapters.query import TableQuery

from .models import Category, FilterSet, SearchRequest, SearchResult


@runtime_checkable
class ListingStore(Protocol):
    """Contract for the read-only listing data store."""

    async def select(self, query: TableQuery) -> list[dict[str, Any]]:
        """Run a table query and return the matching rows."""
        ...


@runtime_checkable
class CategorySearch(Protocol):
    """Contract for one listing category's candidate search."""

    category: Category

    async def fetch_candidates(
        self,
        store: ListingStore,
        terms: list[str],
        filters: FilterSet,
    ) -> list[SearchResult]:
        """Fetch, score and filter candidates of this category."""
        ...


@runtime_checkable
class SearchEngine(Protocol):
    """Contract for search implementations."""

    async def search(self, request: SearchRequest) -> list[SearchResult]:
        """Execute search and return one page of ranked results."""
        ...

    async def get_suggestions(self, query: str, limit: int = 5) -> list[str]:
        """Autocomplete suggestions for a partial query."""
        ...
