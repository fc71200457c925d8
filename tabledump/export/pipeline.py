"""ABOUTME: Export pipeline orchestration from a database query to a CSV file.
ABOUTME: Coordinates connecting, querying, header extraction, and row streaming."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from tabledump.config import ExportJob
from tabledump.export.drivers import connect, parse_locator
from tabledump.export.query import build_query, column_names, execute, iter_rows
from tabledump.export.writer import write_csv
from tabledump.settings import settings

logger = logging.getLogger(__name__)

LogFunc = Callable[[str], None]


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a finished export."""

    output_path: Path
    columns: list[str]
    row_count: int


def _noop(msg: str) -> None:
    pass


def run_export(
    job: ExportJob,
    verbose_callback: LogFunc | None = None,
    batch_size: int | None = None,
) -> ExportResult:
    """Run a single export job end to end.

    Args:
        job: What to read and where to write it.
        verbose_callback: Optional callback for progress messages.
        batch_size: Rows per fetch. Defaults to settings.BATCH_SIZE.

    Returns:
        ExportResult describing the written file.
    """
    log = verbose_callback or _noop
    if batch_size is None:
        batch_size = settings.BATCH_SIZE

    source = parse_locator(job.source)
    sql = build_query(table=job.table, query=job.query)

    log(f"Connecting to {source}...")
    conn = connect(source)
    try:
        log(f"Running: {sql}")
        logger.info("Exporting %s from %s", job.table or "query", source)
        cursor = execute(conn, sql)
        columns = column_names(cursor)
        log(f"  -> {len(columns)} columns: {', '.join(columns)}")

        row_count = write_csv(
            job.output,
            columns,
            iter_rows(cursor, batch_size),
            dialect=job.dialect,
            delimiter=job.delimiter,
            encoding=job.encoding,
        )
    finally:
        conn.close()

    log(f"  -> {job.output} ({row_count} rows)")
    return ExportResult(output_path=job.output, columns=columns, row_count=row_count)
