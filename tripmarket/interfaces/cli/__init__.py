"""
CLI Interface - Command-line tools for TripMarket.

Provides commands for:
- Listing search and autocomplete
- Local SQLite store setup and loading
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
