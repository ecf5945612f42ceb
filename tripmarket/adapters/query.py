"""
Table Query - Backend-neutral description of one read-only listing query.

Category searches build a TableQuery and hand it to whichever ListingStore
is configured; each store translates it to its own dialect (PostgREST query
string, SQLite WHERE clause).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

__all__ = ["FilterOp", "ColumnFilter", "TableQuery"]


class FilterOp(str, Enum):
    """Supported column operators."""

    EQ = "eq"
    GTE = "gte"
    LTE = "lte"
    ILIKE = "ilike"  # case-insensitive substring


class ColumnFilter(NamedTuple):
    column: str
    op: FilterOp
    value: Any


@dataclass
class TableQuery:
    """
    Chainable query builder.

    Example:
        >>> q = TableQuery("properties").eq("is_published", True).gte("rating", 4).limit(100)
    """

    table: str
    columns: list[str] = field(default_factory=lambda: ["*"])
    filters: list[ColumnFilter] = field(default_factory=list)
    # OR-group: a row matches if any of these substring filters match
    any_of: list[ColumnFilter] = field(default_factory=list)
    order_by: str | None = None
    row_limit: int | None = None

    def select(self, *columns: str) -> TableQuery:
        self.columns = list(columns) or ["*"]
        return self

    def eq(self, column: str, value: Any) -> TableQuery:
        self.filters.append(ColumnFilter(column, FilterOp.EQ, value))
        return self

    def gte(self, column: str, value: Any) -> TableQuery:
        self.filters.append(ColumnFilter(column, FilterOp.GTE, value))
        return self

    def lte(self, column: str, value: Any) -> TableQuery:
        self.filters.append(ColumnFilter(column, FilterOp.LTE, value))
        return self

    def ilike(self, column: str, substring: str) -> TableQuery:
        self.filters.append(ColumnFilter(column, FilterOp.ILIKE, substring))
        return self

    def any_ilike(self, columns: list[str], substring: str) -> TableQuery:
        """Match rows where at least one of ``columns`` contains ``substring``."""
        self.any_of = [ColumnFilter(c, FilterOp.ILIKE, substring) for c in columns]
        return self

    def order(self, column: str) -> TableQuery:
        self.order_by = column
        return self

    def limit(self, count: int) -> TableQuery:
        self.row_limit = count
        return self
