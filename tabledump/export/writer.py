# ABOUTME: CSV writer that streams a header and result rows to disk.
# ABOUTME: Writes through a temporary sibling file so failed exports never leave partial output.

import csv
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DIALECT_ATTRS = (
    "delimiter",
    "quotechar",
    "escapechar",
    "doublequote",
    "skipinitialspace",
    "lineterminator",
    "quoting",
)


def resolve_dialect(name: str = "excel", delimiter: str | None = None) -> type[csv.Dialect]:
    """Build a CSV dialect from a registered dialect name and an optional delimiter.

    Args:
        name: Name of a dialect known to the csv module (excel, excel-tab, unix).
        delimiter: Single character replacing the dialect's delimiter.

    Returns:
        A csv.Dialect subclass usable with csv.writer.

    Raises:
        ValueError: If the dialect is unknown or the delimiter is not one character.
    """
    try:
        base = csv.get_dialect(name)
    except csv.Error:
        raise ValueError(f"Unknown CSV dialect '{name}', expected one of {sorted(csv.list_dialects())}") from None

    if delimiter is not None and len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")

    attrs = {attr: getattr(base, attr) for attr in _DIALECT_ATTRS}
    if delimiter is not None:
        attrs["delimiter"] = delimiter

    return type(f"{name.replace('-', '_')}_export", (csv.Dialect,), attrs)


def format_value(value: Any) -> Any:
    """Prepare a single cell for the csv writer.

    None becomes an empty field and bytes are written as lowercase hex.
    """
    if value is None:
        return ""
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).hex()
    return value


def write_csv(
    output_path: Path,
    header: Sequence[str],
    rows: Iterable[Sequence[Any]],
    dialect: str = "excel",
    delimiter: str | None = None,
    encoding: str = "utf-8",
) -> int:
    """Write a header row followed by every row to `output_path`.

    The file is first written to ``<name>.part`` next to the target and moved into
    place only after the last row. If anything raises, the partial file is removed,
    an existing target is left untouched, and the exception propagates.

    Args:
        output_path: Destination CSV file. Parent directories are created.
        header: Column names.
        rows: Row sequences, consumed once.
        dialect: Name of the CSV dialect.
        delimiter: Optional delimiter override.
        encoding: Text encoding of the output file.

    Returns:
        Number of data rows written, excluding the header.
    """
    csv_dialect = resolve_dialect(dialect, delimiter)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    part_path = output_path.with_name(f"{output_path.name}.part")

    row_count = 0
    try:
        with part_path.open("w", newline="", encoding=encoding) as f:
            writer = csv.writer(f, dialect=csv_dialect)
            writer.writerow(header)
            for row in rows:
                writer.writerow([format_value(value) for value in row])
                row_count += 1
        part_path.replace(output_path)
    except Exception:
        part_path.unlink(missing_ok=True)
        raise

    logger.info("Wrote %d rows to %s", row_count, output_path)
    return row_count
