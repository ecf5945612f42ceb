"""
Adapters - External service integrations.

All listing-store access is wrapped here to isolate the search domain from
backend changes.
"""

from .factory import create_listing_store
from .query import ColumnFilter, FilterOp, TableQuery
from .sqlite import SQLiteListingStore
from .supabase import SupabaseStore

__all__ = [
    # Query model
    "TableQuery",
    "ColumnFilter",
    "FilterOp",
    # Stores
    "SupabaseStore",
    "SQLiteListingStore",
    "create_listing_store",
]
