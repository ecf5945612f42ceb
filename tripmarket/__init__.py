"""
TripMarket - Relevance search across travel marketplace listings.

Example:
    >>> from tripmarket.domains.search import RelevanceSearchEngine, SearchRequest
    >>> engine = RelevanceSearchEngine(store)
    >>> results = await engine.search(SearchRequest(query="beach villa"))
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
