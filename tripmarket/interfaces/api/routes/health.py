"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends

from tripmarket import __version__
from tripmarket.domains.search import RelevanceSearchEngine
from tripmarket.interfaces.api.deps import get_search_engine

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "tripmarket"}


@router.get("/api")
async def api_info(engine: RelevanceSearchEngine = Depends(get_search_engine)) -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "TripMarket Search API",
        "version": __version__,
        "docs": "/docs",
        "search": engine.describe(),
    }
