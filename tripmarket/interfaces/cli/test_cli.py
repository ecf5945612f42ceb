"""Tests for the command-line interface."""

import json
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tripmarket import __version__
from tripmarket.config import get_settings

from .main import app

runner = CliRunner()

LISTINGS = {
    "properties": [
        {"id": "p1", "title": "Beach Villa", "location": "Gisenyi", "price_per_night": 120,
         "rating": 4.5, "is_published": 1},
        {"id": "p2", "title": "Beach Hut", "is_published": 0},
    ],
    "tours": [
        {"id": "t1", "title": "Beach Walk", "location": "Gisenyi", "price_per_adult": 30,
         "status": "approved"},
    ],
}


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the CLI at a temporary SQLite store."""
    path = tmp_path / "listings.db"
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.setenv("DB_PATH", str(path))
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


@pytest.fixture
def loaded_db(tmp_path: Path, db_path: Path) -> Path:
    """A temporary store loaded with sample listings."""
    source = tmp_path / "listings.json"
    source.write_text(json.dumps(LISTINGS))
    result = runner.invoke(app, ["load", str(source)])
    assert result.exit_code == 0, result.output
    return db_path


def test_version() -> None:
    """Test version output."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_popular() -> None:
    """Test popular searches are listed."""
    result = runner.invoke(app, ["popular"])
    assert result.exit_code == 0
    assert "Beach resort" in result.output
    assert "4x4 rental" in result.output


def test_init_creates_database(db_path: Path) -> None:
    """Test init creates the SQLite file."""
    result = runner.invoke(app, ["init", "--db", str(db_path)])
    assert result.exit_code == 0
    assert db_path.exists()


def test_load_reports_counts(loaded_db: Path, tmp_path: Path) -> None:
    """Test load prints per-table row counts."""
    source = tmp_path / "more.json"
    source.write_text(json.dumps({"tour_packages": [{"title": "Lake Escape"}]}))

    result = runner.invoke(app, ["load", str(source), "--db", str(loaded_db)])

    assert result.exit_code == 0
    assert "tour_packages" in result.output


def test_load_missing_file(tmp_path: Path) -> None:
    """Test a missing source file exits with an error."""
    result = runner.invoke(app, ["load", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_search_over_loaded_store(loaded_db: Path) -> None:
    """Test search prints matching published listings."""
    result = runner.invoke(app, ["search", "beach", "--sort", "price-low"])

    assert result.exit_code == 0, result.output
    assert "Beach Walk" in result.output
    assert "Beach Villa" in result.output
    assert "Beach Hut" not in result.output


def test_search_no_results(loaded_db: Path) -> None:
    """Test an unmatched query reports no results."""
    result = runner.invoke(app, ["search", "zzz999", "--type", "tours"])
    assert result.exit_code == 0
    assert "No results" in result.output


def test_search_invalid_sort() -> None:
    """Test unknown sort modes are usage errors."""
    result = runner.invoke(app, ["search", "beach", "--sort", "cheapest"])
    assert result.exit_code == 2


def test_search_invalid_limit(db_path: Path) -> None:
    """Test a zero limit is rejected before searching."""
    result = runner.invoke(app, ["search", "beach", "--limit", "0"])
    assert result.exit_code == 2
    assert "Invalid search" in result.output


def test_suggest(loaded_db: Path) -> None:
    """Test suggestions from the loaded store."""
    result = runner.invoke(app, ["suggest", "beach"])
    assert result.exit_code == 0
    assert "Beach Villa" in result.output
    assert "Beach Walk" in result.output


def test_missing_supabase_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the default backend without credentials exits cleanly."""
    monkeypatch.setenv("STORE_BACKEND", "supabase")
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("SUPABASE_KEY", "")
    get_settings.cache_clear()
    try:
        result = runner.invoke(app, ["suggest", "beach"])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 1
    assert "SUPABASE_URL" in result.output
