"""
Tests for per-category candidate searches.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from tripmarket.adapters.query import ColumnFilter, FilterOp
from tripmarket.config import StorageError

from .categories import (
    MAX_RESULTS,
    ListingSearch,
    PackageSearch,
    PropertySearch,
    TourSearch,
    TransportSearch,
    default_category_searches,
    price_of,
)
from .models import Category, FilterSet, SearchResult

ALL_FILTERS = FilterSet(
    priceMin=100,
    priceMax=500,
    rating=4,
    category="wildlife",
    location="Kivu",
    bedrooms=2,
    maxGuests=4,
    propertyType="villa",
    amenities=["wifi"],
)


@pytest.fixture
def mock_store() -> AsyncMock:
    """Create a mock listing store."""
    mock = AsyncMock()
    mock.select.return_value = []
    return mock


# --- Query Construction Tests ---


def test_property_query_applies_property_filters() -> None:
    """Test property search maps every relevant filter to its columns."""
    query = PropertySearch().build_query(ALL_FILTERS)
    assert query.table == "properties"
    assert query.filters == [
        ColumnFilter("is_published", FilterOp.EQ, True),
        ColumnFilter("price_per_night", FilterOp.GTE, 100),
        ColumnFilter("price_per_night", FilterOp.LTE, 500),
        ColumnFilter("rating", FilterOp.GTE, 4),
        ColumnFilter("location", FilterOp.ILIKE, "Kivu"),
        ColumnFilter("bedrooms", FilterOp.GTE, 2),
        ColumnFilter("max_guests", FilterOp.GTE, 4),
        ColumnFilter("property_type", FilterOp.EQ, "villa"),
    ]


def test_tour_query_applies_tour_filters() -> None:
    """Test tour search uses approval status and the category filter."""
    query = TourSearch().build_query(ALL_FILTERS)
    assert query.table == "tours"
    assert query.filters == [
        ColumnFilter("status", FilterOp.EQ, "approved"),
        ColumnFilter("price_per_adult", FilterOp.GTE, 100),
        ColumnFilter("price_per_adult", FilterOp.LTE, 500),
        ColumnFilter("rating", FilterOp.GTE, 4),
        ColumnFilter("location", FilterOp.ILIKE, "Kivu"),
        ColumnFilter("category", FilterOp.EQ, "wildlife"),
    ]


def test_package_query_applies_package_filters() -> None:
    """Test package search ignores property and tour specific filters."""
    query = PackageSearch().build_query(ALL_FILTERS)
    assert query.table == "tour_packages"
    assert query.filters == [
        ColumnFilter("is_published", FilterOp.EQ, True),
        ColumnFilter("price_per_person", FilterOp.GTE, 100),
        ColumnFilter("price_per_person", FilterOp.LTE, 500),
        ColumnFilter("rating", FilterOp.GTE, 4),
        ColumnFilter("location", FilterOp.ILIKE, "Kivu"),
    ]


def test_transport_query_only_filters_price() -> None:
    """Test transport search only applies price bounds."""
    query = TransportSearch().build_query(ALL_FILTERS)
    assert query.table == "transport_vehicles"
    assert query.filters == [
        ColumnFilter("is_published", FilterOp.EQ, True),
        ColumnFilter("price_per_day", FilterOp.GTE, 100),
        ColumnFilter("price_per_day", FilterOp.LTE, 500),
    ]


def test_zero_and_invalid_filters_are_not_applied() -> None:
    """Test zero bounds and unreadable numbers leave the query unfiltered."""
    filters = FilterSet(priceMin=0, priceMax="lots", rating=None, location="")
    query = PropertySearch().build_query(filters)
    assert query.filters == [ColumnFilter("is_published", FilterOp.EQ, True)]


async def test_fetch_caps_rows_and_orders(mock_store: AsyncMock) -> None:
    """Test every fetch is bounded and deterministically ordered."""
    await TourSearch().fetch_candidates(mock_store, ["safari"], FilterSet())
    query = mock_store.select.call_args.args[0]
    assert query.row_limit == MAX_RESULTS
    assert query.order_by == "id"


async def test_custom_row_cap(mock_store: AsyncMock) -> None:
    """Test the per-category cap is configurable."""
    await PropertySearch(max_results=10).fetch_candidates(mock_store, [], FilterSet())
    assert mock_store.select.call_args.args[0].row_limit == 10


# --- Scoring Tests ---


async def test_property_weighted_score(mock_store: AsyncMock) -> None:
    """Test property fields are weighted 10/5/8/6 plus rating bonus."""
    mock_store.select.return_value = [
        {
            "id": "p1",
            "title": "Lake View Villa",
            "description": "Quiet villa by the lake",
            "location": "Lake Kivu",
            "property_type": "villa",
            "rating": 4,
        }
    ]
    results = await PropertySearch().fetch_candidates(mock_store, ["lake"], FilterSet())

    assert len(results) == 1
    result = results[0]
    assert result.id == "p1"
    assert result.type == Category.PROPERTY
    # title 20 + description 10 + location 16 + rating 8
    assert result.score == pytest.approx(54)
    assert result.highlights == ["lake", "lake", "lake"]
    assert result.data["title"] == "Lake View Villa"


async def test_property_title_falls_back_to_name(mock_store: AsyncMock) -> None:
    """Test properties without a title are scored on their name."""
    mock_store.select.return_value = [{"id": 7, "title": None, "name": "Hillside Cottage"}]
    results = await PropertySearch().fetch_candidates(mock_store, ["cottage"], FilterSet())
    assert results[0].score == 20
    assert results[0].id == "7"


async def test_tour_category_field_is_highlighted(mock_store: AsyncMock) -> None:
    """Test tour category scores at weight 6 and contributes highlights."""
    mock_store.select.return_value = [
        {"id": "t1", "title": "Gorilla Trek", "category": "wildlife"}
    ]
    results = await TourSearch().fetch_candidates(mock_store, ["wildlife"], FilterSet())
    assert results[0].score == 12
    assert results[0].highlights == ["wildlife"]


async def test_package_has_no_type_field(mock_store: AsyncMock) -> None:
    """Test packages score title, description and location only."""
    mock_store.select.return_value = [
        {"id": "k1", "title": "Lake Escape", "category": "lake", "location": "Gisenyi"}
    ]
    results = await PackageSearch().fetch_candidates(mock_store, ["lake"], FilterSet())
    assert results[0].score == 20


async def test_transport_type_weight_is_eight(mock_store: AsyncMock) -> None:
    """Test vehicle_type carries weight 8 and location is not scored."""
    mock_store.select.return_value = [
        {
            "id": "v1",
            "title": "Land Cruiser",
            "vehicle_type": "4x4",
            "description": "Rugged 4x4 for safaris",
            "location": "4x4 depot",
        }
    ]
    results = await TransportSearch().fetch_candidates(mock_store, ["4x4"], FilterSet())
    # type 16 + description 10
    assert results[0].score == 26
    assert results[0].highlights == ["4x4", "4x4"]


async def test_rating_bonus_without_text_match(mock_store: AsyncMock) -> None:
    """Test rating alone keeps a listing with bonus rating * 2."""
    mock_store.select.return_value = [{"id": "p1", "title": "Lakeside Cabin", "rating": 4.5}]
    results = await PropertySearch().fetch_candidates(mock_store, ["zzz999"], FilterSet())
    assert results[0].score == pytest.approx(9.0)
    assert results[0].highlights == []


async def test_zero_score_rows_are_dropped(mock_store: AsyncMock) -> None:
    """Test a listing with no relevance and no rating is excluded."""
    mock_store.select.return_value = [{"id": "p1", "title": "Lakeside Cabin"}]
    results = await PropertySearch().fetch_candidates(mock_store, ["zzz999"], FilterSet())
    assert results == []


async def test_non_numeric_rating_counts_as_zero(mock_store: AsyncMock) -> None:
    """Test unreadable ratings add no bonus."""
    mock_store.select.return_value = [{"id": "p1", "title": "Cabin", "rating": "n/a"}]
    results = await PropertySearch().fetch_candidates(mock_store, ["zzz"], FilterSet())
    assert results == []


async def test_store_failure_yields_no_candidates(mock_store: AsyncMock) -> None:
    """Test store errors are logged, not raised."""
    mock_store.select.side_effect = StorageError("tours unavailable")
    results = await TourSearch().fetch_candidates(mock_store, ["safari"], FilterSet())
    assert results == []


async def test_store_returning_none(mock_store: AsyncMock) -> None:
    """Test a store returning no data at all yields no candidates."""
    mock_store.select.return_value = None
    assert await PackageSearch().fetch_candidates(mock_store, ["x"], FilterSet()) == []


# --- Registry Tests ---


def test_base_search_is_abstract() -> None:
    """Test a category search must define its query and weighted fields."""
    with pytest.raises(TypeError):
        ListingSearch()


def test_default_searches_order() -> None:
    """Test categories run in property, tour, package, transport order."""
    searches = default_category_searches()
    assert [s.category for s in searches] == [
        Category.PROPERTY,
        Category.TOUR,
        Category.PACKAGE,
        Category.TRANSPORT,
    ]


@pytest.mark.parametrize(
    "category,column",
    [
        (Category.PROPERTY, "price_per_night"),
        (Category.TOUR, "price_per_adult"),
        (Category.PACKAGE, "price_per_person"),
        (Category.TRANSPORT, "price_per_day"),
    ],
)
def test_price_of_reads_category_column(category: Category, column: str) -> None:
    """Test price sorting reads the category's own price column."""
    result = SearchResult(id="x", type=category, score=1, data={column: 75, "price": 1})
    assert price_of(result) == 75


def test_price_of_missing_is_zero() -> None:
    """Test a missing price counts as zero."""
    result = SearchResult(id="x", type=Category.TOUR, score=1, data={})
    assert price_of(result) == 0
