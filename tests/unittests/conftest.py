"""Contains configurations for the test run."""

import sqlite3
from pathlib import Path

import duckdb
import pytest

from tabledump.export import drivers


@pytest.fixture(scope="session")
def resources_folder() -> Path:
    """Returns the path to the test resources folder."""
    return Path(__file__).parents[1] / "resources"


@pytest.fixture
def people_db(tmp_path: Path) -> Path:
    """SQLite database with a two-row people table."""
    db_path = tmp_path / "people.sqlite"
    conn = sqlite3.connect(str(db_path))
    conn.execute("CREATE TABLE people (id INTEGER, name TEXT)")
    conn.executemany("INSERT INTO people VALUES (?, ?)", [(1, "Ann"), (2, "Bo")])
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def people_duckdb(tmp_path: Path) -> Path:
    """DuckDB database with the same people table."""
    db_path = tmp_path / "people.duckdb"
    conn = duckdb.connect(str(db_path))
    conn.execute("CREATE TABLE people (id INTEGER, name VARCHAR)")
    conn.execute("INSERT INTO people VALUES (1, 'Ann'), (2, 'Bo')")
    conn.close()
    return db_path


@pytest.fixture
def isolated_drivers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let a test register drivers without leaking them into other tests."""
    monkeypatch.setattr(drivers, "_drivers", dict(drivers._drivers))
