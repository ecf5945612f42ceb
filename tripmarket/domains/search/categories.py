"""
Category Searches - One candidate source per listing category.

Each category knows its table, its published flag, which structured filters
apply to its schema and how its text fields are weighted:

    category   title  description  location  type
    property     10        5           8      6 (property_type)
    tour         10        5           8      6 (category)
    package      10        5           8      -
    transport    10        5           -      8 (vehicle_type)

Every category adds a popularity bonus of ``rating * 2``. Rows scoring
exactly zero are dropped.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Any

from tripmarket.adapters.query import TableQuery

from .contracts import ListingStore
from .models import Category, FilterSet, SearchResult, SearchType
from .scoring import FieldScore, score_field

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_RESULTS",
    "RATING_BONUS",
    "ListingSearch",
    "PropertySearch",
    "TourSearch",
    "PackageSearch",
    "TransportSearch",
    "SEARCH_TYPE_CATEGORIES",
    "default_category_searches",
    "price_of",
    "as_number",
]

MAX_RESULTS = 100
RATING_BONUS = 2


def as_number(value: Any) -> float:
    """Read a numeric column leniently; missing or unreadable values are 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class ListingSearch(ABC):
    """
    Base category search: fetch rows, score them, keep the relevant ones.

    Subclasses set the class attributes and implement ``build_query`` and
    ``weighted_fields``.
    """

    category: Category
    table: str
    price_column: str

    def __init__(self, max_results: int = MAX_RESULTS) -> None:
        self.max_results = max_results

    @abstractmethod
    def build_query(self, filters: FilterSet) -> TableQuery:
        """Store query with the published flag and this category's filters."""

    @abstractmethod
    def weighted_fields(self, row: dict[str, Any]) -> list[tuple[str | None, float]]:
        """(text, weight) pairs scored for one row, in highlight order."""

    async def fetch_candidates(
        self,
        store: ListingStore,
        terms: list[str],
        filters: FilterSet,
    ) -> list[SearchResult]:
        """
        Fetch up to ``max_results`` rows and return the scored candidates.

        A failing store call is logged and yields no candidates.
        """
        query = self.build_query(filters).order("id").limit(self.max_results)
        try:
            rows = await store.select(query)
        except Exception as e:
            logger.error("%s search failed: %s", self.category.value, e)
            return []

        candidates = []
        for row in rows or []:
            candidate = self.score_row(row, terms)
            if candidate is not None:
                candidates.append(candidate)

        logger.debug(
            "%s search: %d rows -> %d candidates",
            self.category.value,
            len(rows or []),
            len(candidates),
        )
        return candidates

    def score_row(self, row: dict[str, Any], terms: list[str]) -> SearchResult | None:
        """Score one row; ``None`` when it has no relevance at all."""
        fields: list[FieldScore] = [
            score_field(value, terms, weight) for value, weight in self.weighted_fields(row)
        ]
        total = sum(f.score for f in fields) + as_number(row.get("rating")) * RATING_BONUS
        if total <= 0:
            return None

        highlights: list[str] = []
        for f in fields:
            highlights.extend(f.highlights)

        return SearchResult(
            id=str(row.get("id", "")),
            type=self.category,
            score=total,
            data=row,
            highlights=highlights,
        )

    def _apply_price(self, query: TableQuery, filters: FilterSet) -> None:
        if filters.price_min:
            query.gte(self.price_column, filters.price_min)
        if filters.price_max:
            query.lte(self.price_column, filters.price_max)

    @staticmethod
    def _apply_rating_and_location(query: TableQuery, filters: FilterSet) -> None:
        if filters.rating:
            query.gte("rating", filters.rating)
        if filters.location:
            query.ilike("location", filters.location)


class PropertySearch(ListingSearch):
    category = Category.PROPERTY
    table = "properties"
    price_column = "price_per_night"

    def build_query(self, filters: FilterSet) -> TableQuery:
        query = TableQuery(self.table).eq("is_published", True)
        self._apply_price(query, filters)
        self._apply_rating_and_location(query, filters)
        if filters.bedrooms:
            query.gte("bedrooms", filters.bedrooms)
        if filters.max_guests:
            query.gte("max_guests", filters.max_guests)
        if filters.property_type:
            query.eq("property_type", filters.property_type)
        return query

    def weighted_fields(self, row: dict[str, Any]) -> list[tuple[str | None, float]]:
        return [
            (row.get("title") or row.get("name"), 10),
            (row.get("description"), 5),
            (row.get("location"), 8),
            (row.get("property_type"), 6),
        ]


class TourSearch(ListingSearch):
    category = Category.TOUR
    table = "tours"
    price_column = "price_per_adult"

    def build_query(self, filters: FilterSet) -> TableQuery:
        query = TableQuery(self.table).eq("status", "approved")
        self._apply_price(query, filters)
        self._apply_rating_and_location(query, filters)
        if filters.category:
            query.eq("category", filters.category)
        return query

    def weighted_fields(self, row: dict[str, Any]) -> list[tuple[str | None, float]]:
        return [
            (row.get("title"), 10),
            (row.get("description"), 5),
            (row.get("location"), 8),
            (row.get("category"), 6),
        ]


class PackageSearch(ListingSearch):
    category = Category.PACKAGE
    table = "tour_packages"
    price_column = "price_per_person"

    def build_query(self, filters: FilterSet) -> TableQuery:
        query = TableQuery(self.table).eq("is_published", True)
        self._apply_price(query, filters)
        self._apply_rating_and_location(query, filters)
        return query

    def weighted_fields(self, row: dict[str, Any]) -> list[tuple[str | None, float]]:
        return [
            (row.get("title"), 10),
            (row.get("description"), 5),
            (row.get("location"), 8),
        ]


class TransportSearch(ListingSearch):
    category = Category.TRANSPORT
    table = "transport_vehicles"
    price_column = "price_per_day"

    def build_query(self, filters: FilterSet) -> TableQuery:
        query = TableQuery(self.table).eq("is_published", True)
        self._apply_price(query, filters)
        return query

    def weighted_fields(self, row: dict[str, Any]) -> list[tuple[str | None, float]]:
        return [
            (row.get("title"), 10),
            (row.get("vehicle_type"), 8),
            (row.get("description"), 5),
        ]


# Fixed execution order; relevance ties keep this order.
_SEARCH_CLASSES: tuple[type[ListingSearch], ...] = (
    PropertySearch,
    TourSearch,
    PackageSearch,
    TransportSearch,
)

PRICE_COLUMNS: dict[Category, str] = {cls.category: cls.price_column for cls in _SEARCH_CLASSES}

SEARCH_TYPE_CATEGORIES: dict[SearchType, frozenset[Category]] = {
    SearchType.ALL: frozenset(Category),
    SearchType.PROPERTIES: frozenset({Category.PROPERTY}),
    SearchType.TOURS: frozenset({Category.TOUR}),
    SearchType.PACKAGES: frozenset({Category.PACKAGE}),
    SearchType.TRANSPORT: frozenset({Category.TRANSPORT}),
}


def default_category_searches(max_results: int = MAX_RESULTS) -> list[ListingSearch]:
    """All category searches, in execution order."""
    return [cls(max_results) for cls in _SEARCH_CLASSES]


def price_of(result: SearchResult) -> float:
    """Price used by the price sort modes, read from the category's own column."""
    return as_number(result.data.get(PRICE_COLUMNS[result.type]))
