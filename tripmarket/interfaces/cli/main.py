"""
CLI Main - Typer-based command-line interface.

Usage:
    tripmarket search "beach villa" --type properties --sort price-low
    tripmarket suggest lake
    tripmarket popular
    tripmarket init --db data/tripmarket.db
    tripmarket load listings.json
    tripmarket serve
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from tripmarket.config import TripMarketError
from tripmarket.domains.search import SearchType, SortMode

app = typer.Typer(
    name="tripmarket",
    help="TripMarket - Travel listing search",
    add_completion=False,
)
console = Console()


@app.command()
def search(
    query: str = typer.Argument("", help="Search query"),
    search_type: SearchType = typer.Option(SearchType.ALL, "--type", "-t", help="Listing category"),
    sort: SortMode = typer.Option(SortMode.RELEVANCE, "--sort", "-s", help="Result ordering"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Number of results"),
    offset: int = typer.Option(0, "--offset", help="Results to skip"),
    price_min: float | None = typer.Option(None, "--price-min", help="Minimum price"),
    price_max: float | None = typer.Option(None, "--price-max", help="Maximum price"),
    rating: float | None = typer.Option(None, "--rating", help="Minimum rating"),
    location: str | None = typer.Option(None, "--location", "-l", help="Location contains"),
    category: str | None = typer.Option(None, "--category", "-c", help="Tour category"),
) -> None:
    """Search properties, tours, packages and transport."""
    filters = {
        "price_min": price_min,
        "price_max": price_max,
        "rating": rating,
        "location": location,
        "category": category,
    }
    asyncio.run(_search_async(query, search_type, sort, limit, offset, filters))


async def _search_async(
    query: str,
    search_type: SearchType,
    sort: SortMode,
    limit: int | None,
    offset: int,
    filters: dict[str, Any],
) -> None:
    """Async search implementation."""
    from tripmarket.config import get_settings
    from tripmarket.domains.search import SearchRequest

    try:
        request = SearchRequest(
            query=query,
            type=search_type,
            sort=sort,
            limit=limit if limit is not None else get_settings().search_default_limit,
            offset=offset,
            filters=filters,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid search:[/red] {e}")
        raise typer.Exit(2)

    store, engine = _open_engine()
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Searching...", total=None)
            results = await engine.search(request)
    finally:
        await store.close()

    if not results:
        console.print(f"[yellow]No results for:[/yellow] {query or '(empty query)'}")
        return

    table = Table(title=f"Results for '{query}'" if query else "Results")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Highlights", style="magenta")

    for rank, result in enumerate(results, offset + 1):
        title = result.data.get("title") or result.data.get("name") or result.id
        table.add_row(
            str(rank),
            result.type.value,
            result.id,
            str(title),
            f"{result.score:.2f}",
            ", ".join(result.highlights),
        )

    console.print(table)


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Partial query"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Number of suggestions"),
) -> None:
    """Autocomplete listing titles and locations."""
    asyncio.run(_suggest_async(query, limit))


async def _suggest_async(query: str, limit: int | None) -> None:
    from tripmarket.config import get_settings

    store, engine = _open_engine()
    if limit is None:
        limit = get_settings().suggestion_limit
    try:
        suggestions = await engine.get_suggestions(query, limit)
    finally:
        await store.close()

    if not suggestions:
        console.print("[dim]No suggestions[/dim]")
        return
    for suggestion in suggestions:
        console.print(f"  {suggestion}")


@app.command()
def popular() -> None:
    """Show popular searches."""
    from tripmarket.domains.search import get_popular_searches

    for term in get_popular_searches():
        console.print(f"  {term}")


@app.command()
def init(
    db_path: Path | None = typer.Option(None, "--db", "-d", help="SQLite database path"),
) -> None:
    """Create the local SQLite listing tables."""
    asyncio.run(_init_async(db_path))


async def _init_async(db_path: Path | None) -> None:
    from tripmarket.adapters import SQLiteListingStore
    from tripmarket.config import get_settings

    path = db_path or get_settings().db_path
    store = SQLiteListingStore(path)
    try:
        await store.initialize()
    finally:
        await store.close()

    console.print("\n[green]Initialization complete![/green]")
    console.print(f"[dim]Database: {path}[/dim]")


@app.command()
def load(
    source: Path = typer.Argument(..., help="JSON file: {table: [rows...]}"),
    db_path: Path | None = typer.Option(None, "--db", "-d", help="SQLite database path"),
) -> None:
    """Load listing rows from JSON into the local SQLite store."""
    if not source.exists():
        console.print(f"[red]Error:[/red] File not found: {source}")
        raise typer.Exit(1)

    asyncio.run(_load_async(source, db_path))


async def _load_async(source: Path, db_path: Path | None) -> None:
    from tripmarket.adapters import SQLiteListingStore
    from tripmarket.adapters.sqlite import LISTING_TABLES
    from tripmarket.config import get_settings

    data = json.loads(source.read_text())
    store = SQLiteListingStore(db_path or get_settings().db_path)

    table = Table(title="Loaded Listings")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", style="green", justify="right")

    try:
        await store.initialize()
        for name in LISTING_TABLES:
            rows = data.get(name, [])
            for row in rows:
                await store.insert_listing(name, row)
            table.add_row(name, str(len(rows)))
    except TripMarketError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    finally:
        await store.close()

    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print("\n[green]Starting TripMarket search API[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "tripmarket.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from tripmarket import __version__

    console.print(f"TripMarket v{__version__}")


def _open_engine():
    """Build the configured store and an engine over it, exiting on bad config."""
    from tripmarket.adapters import create_listing_store
    from tripmarket.config import configure_logging, get_settings
    from tripmarket.domains.search import RelevanceSearchEngine

    settings = get_settings()
    configure_logging("WARNING")
    try:
        store = create_listing_store(settings)
    except TripMarketError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    engine = RelevanceSearchEngine(
        store,
        fetch_timeout=settings.search_fetch_timeout,
        max_results=settings.search_max_results,
    )
    return store, engine


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
