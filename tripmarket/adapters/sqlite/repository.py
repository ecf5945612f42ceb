"""
SQLite Listing Store - Local listing tables for development and tests.

Features:
- Async operations via aiosqlite
- Same four tables and columns as the hosted store
- TableQuery -> parameterized SQL translation
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from pathlib import Path
from typing import Any

import aiosqlite

from tripmarket.adapters.query import ColumnFilter, FilterOp, TableQuery
from tripmarket.config.errors import ErrorCode, StorageError

logger = logging.getLogger(__name__)

__all__ = ["SQLiteListingStore", "LISTING_TABLES", "build_sql"]

LISTING_TABLES = ("properties", "tours", "tour_packages", "transport_vehicles")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_OPERATORS = {
    FilterOp.EQ: "=",
    FilterOp.GTE: ">=",
    FilterOp.LTE: "<=",
}


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise StorageError(f"Invalid column or table name: {name!r}", details={"name": name})
    return name


def _like_pattern(substring: str) -> str:
    escaped = substring.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _condition(f: ColumnFilter) -> tuple[str, Any]:
    column = _identifier(f.column)
    if f.op is FilterOp.ILIKE:
        # LIKE is case-insensitive for ASCII in SQLite
        return f"{column} LIKE ? ESCAPE '\\'", _like_pattern(str(f.value))
    return f"{column} {_OPERATORS[f.op]} ?", f.value


def build_sql(query: TableQuery) -> tuple[str, list[Any]]:
    """Translate a TableQuery into a SELECT statement and its parameters."""
    table = _identifier(query.table)
    columns = ", ".join(c if c == "*" else _identifier(c) for c in query.columns)

    clauses: list[str] = []
    params: list[Any] = []
    for f in query.filters:
        clause, value = _condition(f)
        clauses.append(clause)
        params.append(value)

    if query.any_of:
        group = [_condition(f) for f in query.any_of]
        clauses.append("(" + " OR ".join(clause for clause, _ in group) + ")")
        params.extend(value for _, value in group)

    sql = f"SELECT {columns} FROM {table}"
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    if query.order_by:
        sql += f" ORDER BY {_identifier(query.order_by)}"
    if query.row_limit is not None:
        sql += " LIMIT ?"
        params.append(query.row_limit)

    return sql, params


_SCHEMA = """
    CREATE TABLE IF NOT EXISTS properties (
        id TEXT PRIMARY KEY,
        title TEXT,
        name TEXT,
        description TEXT,
        location TEXT,
        property_type TEXT,
        price_per_night REAL,
        bedrooms INTEGER,
        max_guests INTEGER,
        rating REAL,
        review_count INTEGER,
        is_published INTEGER NOT NULL DEFAULT 0,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS tours (
        id TEXT PRIMARY KEY,
        title TEXT,
        description TEXT,
        location TEXT,
        category TEXT,
        price_per_adult REAL,
        rating REAL,
        review_count INTEGER,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS tour_packages (
        id TEXT PRIMARY KEY,
        title TEXT,
        description TEXT,
        location TEXT,
        price_per_person REAL,
        rating REAL,
        review_count INTEGER,
        is_published INTEGER NOT NULL DEFAULT 0,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS transport_vehicles (
        id TEXT PRIMARY KEY,
        title TEXT,
        description TEXT,
        vehicle_type TEXT,
        price_per_day REAL,
        rating REAL,
        review_count INTEGER,
        is_published INTEGER NOT NULL DEFAULT 0,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE INDEX IF NOT EXISTS idx_properties_published ON properties(is_published);
    CREATE INDEX IF NOT EXISTS idx_tours_status ON tours(status);
    CREATE INDEX IF NOT EXISTS idx_tour_packages_published ON tour_packages(is_published);
    CREATE INDEX IF NOT EXISTS idx_transport_published ON transport_vehicles(is_published);
"""


class SQLiteListingStore:
    """
    SQLite-backed listing store.

    Example:
        >>> store = SQLiteListingStore("data/tripmarket.db")
        >>> await store.initialize()
        >>> await store.insert_listing("tours", {"title": "Safari", "status": "approved"})
        >>> rows = await store.select(TableQuery("tours").eq("status", "approved"))
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the shared database connection."""
        if self._connection is not None:
            return self._connection

        # Concurrent category fetches must not each open a connection
        async with self._connect_lock:
            if self._connection is None:
                try:
                    conn = await aiosqlite.connect(str(self.db_path))
                except aiosqlite.Error as e:
                    raise StorageError(
                        f"Cannot open {self.db_path}: {e}",
                        code=ErrorCode.STORAGE_CONNECTION_FAILED,
                    ) from e
                conn.row_factory = aiosqlite.Row
                self._connection = conn
        return self._connection

    async def initialize(self) -> None:
        """Create the listing tables if missing."""
        conn = await self._get_connection()
        await conn.executescript(_SCHEMA)
        await conn.commit()
        logger.info("Listing store initialized: %s", self.db_path)

    async def insert_listing(self, table: str, row: dict[str, Any]) -> str:
        """
        Insert one listing row.

        Returns:
            The row id (generated when ``row`` has none)
        """
        record = dict(row)
        record.setdefault("id", str(uuid.uuid4()))
        columns = [_identifier(c) for c in record]
        placeholders = ", ".join("?" for _ in columns)

        conn = await self._get_connection()
        await conn.execute(
            f"INSERT INTO {_identifier(table)} ({', '.join(columns)}) VALUES ({placeholders})",
            list(record.values()),
        )
        await conn.commit()
        return str(record["id"])

    async def select(self, query: TableQuery) -> list[dict[str, Any]]:
        """
        Run a read-only table query.

        Raises:
            StorageError: on SQL errors (unknown table or column)
        """
        sql, params = build_sql(query)
        conn = await self._get_connection()

        try:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Query on {query.table} failed: {e}",
                details={"table": query.table},
            ) from e

        return [dict(row) for row in rows]

    async def count(self, table: str) -> int:
        """Row count of one listing table."""
        conn = await self._get_connection()
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {_identifier(table)}")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
