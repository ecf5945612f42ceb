"""
Search Routes - Listing search, autocomplete and popular searches.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tripmarket.domains.search import (
    FilterSet,
    RelevanceSearchEngine,
    SearchRequest,
    SearchResult,
    SearchType,
    SortMode,
)
from tripmarket.interfaces.api.deps import get_search_engine

router = APIRouter()


class SearchBody(BaseModel):
    """Search request body."""

    query: str = Field(default="", description="Free-text query")
    type: SearchType = SearchType.ALL
    filters: FilterSet = Field(default_factory=FilterSet)
    sort: SortMode = SortMode.RELEVANCE
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class SearchResponse(BaseModel):
    """Search response."""

    query: str
    results: list[SearchResult]
    total: int


class SuggestionsResponse(BaseModel):
    query: str
    suggestions: list[str]


class PopularResponse(BaseModel):
    searches: list[str]


@router.post("", response_model=SearchResponse)
async def search(
    body: SearchBody,
    engine: RelevanceSearchEngine = Depends(get_search_engine),
) -> SearchResponse:
    """
    Search properties, tours, packages and transport.

    - **query**: Free text; empty ranks by rating only
    - **type**: all, properties, tours, packages or transport
    - **filters**: priceMin, priceMax, rating, category, location, bedrooms,
      maxGuests, propertyType, amenities
    - **sort**: relevance, price-low, price-high, rating, newest, popular
    - **limit** / **offset**: page window over the sorted results
    """
    request = SearchRequest(**body.model_dump())
    results = await engine.search(request)
    return SearchResponse(query=body.query, results=results, total=len(results))


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    q: str = Query("", description="Partial query"),
    limit: int = Query(5, ge=1, le=20),
    engine: RelevanceSearchEngine = Depends(get_search_engine),
) -> SuggestionsResponse:
    """Autocomplete titles and locations containing the partial query."""
    return SuggestionsResponse(query=q, suggestions=await engine.get_suggestions(q, limit))


@router.get("/popular", response_model=PopularResponse)
async def popular() -> PopularResponse:
    """Popular searches shown before the user types."""
    return PopularResponse(searches=RelevanceSearchEngine.get_popular_searches())
