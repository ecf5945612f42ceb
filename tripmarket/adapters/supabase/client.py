"""
Supabase Store - Read-only listing queries over the PostgREST API.

Features:
- Async HTTP client with connection reuse
- TableQuery -> PostgREST query-string translation
- Retries on transport failures (not on HTTP error statuses)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tripmarket.adapters.query import ColumnFilter, FilterOp, TableQuery
from tripmarket.config.errors import ErrorCode, StorageError

logger = logging.getLogger(__name__)

__all__ = ["SupabaseStore", "encode_query"]

# Characters that must be quoted inside a PostgREST or=(...) group
_RESERVED = set(',.:()"\\ ')


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _pattern(substring: str) -> str:
    # Postgres LIKE escapes with a backslash; % and _ match literally
    escaped = substring.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"*{escaped}*"


def _quote(value: str) -> str:
    if not any(ch in _RESERVED for ch in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _filter_param(f: ColumnFilter) -> tuple[str, str]:
    if f.op is FilterOp.ILIKE:
        return f.column, f"ilike.{_pattern(str(f.value))}"
    return f.column, f"{f.op.value}.{_format_value(f.value)}"


def encode_query(query: TableQuery) -> list[tuple[str, str]]:
    """
    Translate a TableQuery to PostgREST query parameters.

    Example:
        >>> encode_query(TableQuery("tours").eq("status", "approved").limit(5))
        [('select', '*'), ('status', 'eq.approved'), ('limit', '5')]
    """
    params: list[tuple[str, str]] = [("select", ",".join(query.columns))]
    params.extend(_filter_param(f) for f in query.filters)

    if query.any_of:
        group = ",".join(
            f"{f.column}.ilike.{_quote(_pattern(str(f.value)))}" for f in query.any_of
        )
        params.append(("or", f"({group})"))

    if query.order_by:
        params.append(("order", f"{query.order_by}.asc"))
    if query.row_limit is not None:
        params.append(("limit", str(query.row_limit)))

    return params


class SupabaseStore:
    """
    Listing store backed by a hosted Supabase project.

    Example:
        >>> store = SupabaseStore("https://xyz.supabase.co", "anon-key")
        >>> rows = await store.select(TableQuery("properties").eq("is_published", True))
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        retry_attempts: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize store client.

        Args:
            url: Project URL (without the /rest/v1 suffix)
            api_key: Anon or service-role key
            timeout: Request timeout in seconds
            retry_attempts: Attempts per request on transport failures
            transport: Optional httpx transport (tests)
        """
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def select(self, query: TableQuery) -> list[dict[str, Any]]:
        """
        Run a read-only table query.

        Raises:
            StorageError: on HTTP error status or unreachable host
        """
        client = await self._get_client()
        params = encode_query(query)

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=0.2, max=2),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(f"/{query.table}", params=params)
        except httpx.TransportError as e:
            raise StorageError(
                f"Store unreachable while querying {query.table}",
                details={"table": query.table, "error": str(e)},
                code=ErrorCode.STORAGE_CONNECTION_FAILED,
            ) from e

        if response.is_error:
            raise StorageError(
                f"Query on {query.table} failed with HTTP {response.status_code}",
                details={"table": query.table, "status": response.status_code, "body": _error_body(response)},
            )

        rows = response.json()
        logger.debug("Supabase %s -> %d rows", query.table, len(rows))
        return rows

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
