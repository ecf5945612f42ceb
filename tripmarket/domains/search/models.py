"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchType(str, Enum):
    """Which listing categories a search covers."""

    ALL = "all"
    PROPERTIES = "properties"
    TOURS = "tours"
    PACKAGES = "packages"
    TRANSPORT = "transport"


class SortMode(str, Enum):
    """Result ordering."""

    RELEVANCE = "relevance"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    NEWEST = "newest"
    POPULAR = "popular"


class Category(str, Enum):
    """Listing category tag carried by every result."""

    PROPERTY = "property"
    TOUR = "tour"
    PACKAGE = "package"
    TRANSPORT = "transport"


class FilterSet(BaseModel):
    """
    Structured filters.

    Accepts both snake_case and the camelCase names used by web clients
    (``priceMin``, ``maxGuests``...). Numeric values that cannot be read as a
    finite number become ``None`` so the filter is simply not applied.
    """

    price_min: float | None = Field(default=None, alias="priceMin")
    price_max: float | None = Field(default=None, alias="priceMax")
    rating: float | None = None
    category: str | None = None
    location: str | None = None
    bedrooms: float | None = None
    max_guests: float | None = Field(default=None, alias="maxGuests")
    property_type: str | None = Field(default=None, alias="propertyType")
    # Accepted for compatibility, not applied by any category
    amenities: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("price_min", "price_max", "rating", "bedrooms", "max_guests", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("amenities", mode="before")
    @classmethod
    def _coerce_amenities(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)


class SearchRequest(BaseModel):
    """Search request, built once per call."""

    query: str = ""
    type: SearchType = SearchType.ALL
    filters: FilterSet = Field(default_factory=FilterSet)
    sort: SortMode = SortMode.RELEVANCE
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("type", "sort", "filters", mode="before")
    @classmethod
    def _none_means_default(cls, value: Any, info: Any) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class SearchResult(BaseModel):
    """Single ranked listing (a scored candidate)."""

    id: str
    type: Category
    score: float = Field(ge=0)
    data: dict[str, Any] = Field(default_factory=dict)
    highlights: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
