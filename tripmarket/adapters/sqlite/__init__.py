"""
SQLite Adapter - Local listing store.
"""

from .repository import LISTING_TABLES, SQLiteListingStore, build_sql

__all__ = ["SQLiteListingStore", "LISTING_TABLES", "build_sql"]
