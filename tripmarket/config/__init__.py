"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    ConfigurationError,
    ErrorCode,
    StorageError,
    TripMarketError,
)
from .settings import Settings, configure_logging, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "ErrorCode",
    "TripMarketError",
    "StorageError",
    "ConfigurationError",
]
