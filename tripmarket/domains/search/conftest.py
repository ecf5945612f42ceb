"""
Shared fixtures for search domain tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from tripmarket.adapters.query import FilterOp, TableQuery
from tripmarket.config import StorageError


def _matches(row: dict[str, Any], query: TableQuery) -> bool:
    for f in query.filters:
        value = row.get(f.column)
        if f.op is FilterOp.EQ and value != f.value:
            return False
        if f.op is FilterOp.GTE and (value is None or value < f.value):
            return False
        if f.op is FilterOp.LTE and (value is None or value > f.value):
            return False
        if f.op is FilterOp.ILIKE and f.value.lower() not in str(value or "").lower():
            return False
    if query.any_of:
        return any(
            f.value.lower() in str(row.get(f.column) or "").lower() for f in query.any_of
        )
    return True


class FakeListingStore:
    """In-memory ListingStore that honours TableQuery filters and limits."""

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]] | None = None,
        failing: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.tables = tables or {}
        self.failing = failing or set()
        self.delays = delays or {}
        self.queries: list[TableQuery] = []

    async def select(self, query: TableQuery) -> list[dict[str, Any]]:
        self.queries.append(query)
        if query.table in self.delays:
            await asyncio.sleep(self.delays[query.table])
        if query.table in self.failing:
            raise StorageError(f"{query.table} unavailable")

        rows = [dict(r) for r in self.tables.get(query.table, []) if _matches(r, query)]
        if query.row_limit is not None:
            rows = rows[: query.row_limit]
        return rows

    def tables_queried(self) -> list[str]:
        return [q.table for q in self.queries]


@pytest.fixture
def make_store() -> Callable[..., FakeListingStore]:
    """Factory for in-memory listing stores."""
    return FakeListingStore
