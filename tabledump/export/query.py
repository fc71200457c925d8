# ABOUTME: Query building, execution, and result-set metadata helpers.
# ABOUTME: Turns a table name or SQL into a cursor and reads its column names and rows.

from collections.abc import Iterator
from typing import Any

_TABLE_LISTING_SQL = {
    "sqlite": "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name",
    "duckdb": (
        "SELECT table_name FROM information_schema.tables "
        "WHERE table_type = 'BASE TABLE' AND table_schema = 'main' ORDER BY table_name"
    ),
}


def quote_identifier(name: str) -> str:
    """Quote a table or column name for use in SQL.

    Args:
        name: Raw identifier, may contain spaces, dashes or quotes.

    Returns:
        Double-quoted identifier with embedded quotes doubled.

    Raises:
        ValueError: If name is empty.
    """
    if not name:
        raise ValueError("Identifier must not be empty")
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def build_query(table: str | None = None, query: str | None = None) -> str:
    """Return the SQL to run for either a whole table or an explicit query.

    Args:
        table: Table to select every column and row from.
        query: SQL statement to run as-is.

    Returns:
        SQL text.

    Raises:
        ValueError: Unless exactly one of table or query is given, or if query is blank.
    """
    if (table is None) == (query is None):
        raise ValueError("Exactly one of table or query must be given")

    if query is not None and not query.strip():
        raise ValueError("Query must not be empty")

    if table is not None:
        return f"SELECT * FROM {quote_identifier(table)}"
    return str(query)


def execute(conn: Any, sql: str) -> Any:
    """Run `sql` on a fresh cursor of `conn` and return the cursor."""
    cursor = conn.cursor()
    cursor.execute(sql)
    return cursor


def column_names(cursor: Any) -> list[str]:
    """Read column names from an executed cursor's metadata.

    Args:
        cursor: Executed DB-API cursor.

    Returns:
        Column names in result-set order.

    Raises:
        ValueError: If the statement did not produce a result set.
    """
    if cursor.description is None:
        raise ValueError("Statement did not return a result set")

    return [desc[0] for desc in cursor.description]


def iter_rows(cursor: Any, batch_size: int = 1000) -> Iterator[tuple[Any, ...]]:
    """Return an iterator over the rows of an executed cursor, pulling `batch_size` rows at a time.

    Raises:
        ValueError: If batch_size is less than 1.
    """
    if batch_size < 1:
        raise ValueError(f"Batch size must be at least 1, got {batch_size}")
    return _fetch_batches(cursor, batch_size)


def _fetch_batches(cursor: Any, batch_size: int) -> Iterator[tuple[Any, ...]]:
    while True:
        batch = cursor.fetchmany(batch_size)
        if not batch:
            return
        yield from batch


def list_tables(conn: Any, scheme: str) -> list[str]:
    """List table names in a database.

    Args:
        conn: Open connection.
        scheme: Driver scheme of the connection, selects the catalog query.

    Returns:
        Table names, sorted.

    Raises:
        KeyError: If the scheme has no known catalog query.
    """
    if scheme not in _TABLE_LISTING_SQL:
        raise KeyError(f"Don't know how to list tables for scheme '{scheme}'")

    rows = conn.execute(_TABLE_LISTING_SQL[scheme]).fetchall()
    return [row[0] for row in rows]
