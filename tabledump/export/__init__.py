"""ABOUTME: Export module for reading query results and writing CSV files.
ABOUTME: Holds the driver registry, query helpers, CSV writer, and pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabledump.export.pipeline import ExportResult as ExportResult
    from tabledump.export.pipeline import run_export as run_export


def __getattr__(name: str) -> object:
    """Lazy-import the pipeline so tabledump.config can import the driver registry."""
    if name in ("run_export", "ExportResult"):
        from tabledump.export import pipeline  # noqa: PLC0415

        return getattr(pipeline, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ExportResult", "run_export"]
