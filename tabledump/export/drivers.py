# ABOUTME: Driver registry mapping data-source locator schemes to connection factories.
# ABOUTME: Parses locators like sqlite:///path.db and opens read-only connections.

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import duckdb

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[Path], Any]

_DUCKDB_SUFFIXES = {".duckdb", ".ddb"}

_drivers: dict[str, ConnectionFactory] = {}


@dataclass(frozen=True)
class DataSource:
    """A parsed data-source locator."""

    scheme: str
    path: Path

    def resolve(self, base_dir: Path) -> "DataSource":
        """Anchor a relative path at `base_dir`."""
        if self.path.is_absolute():
            return self
        return DataSource(self.scheme, base_dir / self.path)

    def __str__(self) -> str:
        if self.path.is_absolute():
            return f"{self.scheme}://{self.path}"
        return f"{self.scheme}:{self.path}"


def parse_locator(locator: str) -> DataSource:
    """Split a data-source locator into scheme and file path.

    Accepts ``scheme:///abs/path``, ``scheme:rel/path`` or a bare path. For a bare
    path the scheme is inferred from the file suffix.

    Args:
        locator: The locator string.

    Returns:
        Parsed DataSource.

    Raises:
        ValueError: If the locator or its path is empty.
    """
    locator = locator.strip()
    if not locator:
        raise ValueError("Data-source locator is empty")

    scheme, sep, rest = locator.partition(":")
    # A single-letter prefix is a Windows drive, not a scheme
    if sep and len(scheme) > 1 and scheme.isidentifier():
        path_text = rest[2:] if rest.startswith("//") else rest
        scheme = scheme.lower()
    else:
        path_text = locator
        scheme = "duckdb" if Path(locator).suffix.lower() in _DUCKDB_SUFFIXES else "sqlite"

    if not path_text:
        raise ValueError(f"Data-source locator has no path: '{locator}'")

    return DataSource(scheme, Path(path_text))


def register_driver(scheme: str, factory: ConnectionFactory) -> None:
    """Register a connection factory for a locator scheme, replacing any existing one.

    Args:
        scheme: Locator scheme, e.g. ``sqlite``.
        factory: Callable taking the database path and returning a DB-API connection.
    """
    _drivers[scheme.lower()] = factory


def get_driver(scheme: str) -> ConnectionFactory:
    """Return the connection factory for `scheme`.

    Raises:
        KeyError: If no driver is registered for the scheme.
    """
    try:
        return _drivers[scheme.lower()]
    except KeyError:
        raise KeyError(f"No driver registered for scheme '{scheme}' (known: {registered_schemes()})") from None


def registered_schemes() -> list[str]:
    """Return the registered locator schemes, sorted."""
    return sorted(_drivers)


def connect(locator: str | DataSource) -> Any:
    """Open a read-only connection to the database a locator points at.

    Args:
        locator: Locator string or an already parsed DataSource.

    Returns:
        DB-API connection from the matching driver.

    Raises:
        FileNotFoundError: If the database file doesn't exist.
        KeyError: If the scheme has no registered driver.
    """
    source = parse_locator(locator) if isinstance(locator, str) else locator
    factory = get_driver(source.scheme)

    if not source.path.exists():
        raise FileNotFoundError(f"Database not found: {source.path}")

    logger.debug("Connecting to %s", source)
    return factory(source.path)


def _connect_sqlite(db_path: Path) -> sqlite3.Connection:
    uri = f"{db_path.resolve().as_uri()}?mode=ro"
    return sqlite3.connect(uri, uri=True)


def _connect_duckdb(db_path: Path) -> duckdb.DuckDBPyConnection:
    return duckdb.connect(str(db_path), read_only=True)


register_driver("sqlite", _connect_sqlite)
register_driver("duckdb", _connect_duckdb)
