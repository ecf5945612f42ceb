"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from tripmarket.config.errors import ErrorCode, TripMarketError

    raise TripMarketError(ErrorCode.STORAGE_READ_FAILED, "properties query failed")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Storage errors
    STORAGE_CONNECTION_FAILED = "STORAGE_CONNECTION_FAILED"
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"

    # Configuration errors
    CONFIG_MISSING = "CONFIG_MISSING"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TripMarketError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class StorageError(TripMarketError):
    """Listing store errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
    ) -> None:
        super().__init__(code, message, details)


class ConfigurationError(TripMarketError):
    """Missing or inconsistent settings."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFIG_MISSING, message, details)
