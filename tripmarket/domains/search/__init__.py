"""
Search Domain - Relevance search over marketplace listings.

This domain handles:
- Levenshtein similarity and weighted field scoring
- Per-category candidate search (property, tour, package, transport)
- Merged sorting and pagination
- Autocomplete suggestions and popular searches
"""

from .categories import (
    PackageSearch,
    PropertySearch,
    TourSearch,
    TransportSearch,
    default_category_searches,
)
from .contracts import CategorySearch, ListingStore, SearchEngine
from .engine import RelevanceSearchEngine, sort_results
from .models import Category, FilterSet, SearchRequest, SearchResult, SearchType, SortMode
from .scoring import FieldScore, score_field, tokenize
from .similarity import edit_distance, similarity
from .suggestions import get_popular_searches, get_suggestions

__all__ = [
    # Contracts
    "SearchEngine",
    "CategorySearch",
    "ListingStore",
    # Models
    "SearchRequest",
    "SearchResult",
    "FilterSet",
    "SearchType",
    "SortMode",
    "Category",
    # Engine
    "RelevanceSearchEngine",
    "sort_results",
    "PropertySearch",
    "TourSearch",
    "PackageSearch",
    "TransportSearch",
    "default_category_searches",
    # Scoring
    "similarity",
    "edit_distance",
    "score_field",
    "tokenize",
    "FieldScore",
    # Suggestions
    "get_suggestions",
    "get_popular_searches",
]
