"""ABOUTME: Configuration loaders for export jobs.
ABOUTME: Handles loading and validating exports.yml job definitions."""

import csv
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from tabledump.export.drivers import parse_locator
from tabledump.settings import settings


class ExportJob(BaseModel):
    """A single query-to-CSV export."""

    source: str
    """Data-source locator, e.g. ``sqlite:///data/app.sqlite`` or a bare path."""

    output: Path
    table: str | None = None
    query: str | None = None
    dialect: str = "excel"
    delimiter: str | None = Field(default=None, min_length=1, max_length=1)
    encoding: str = "utf-8"
    description: str = ""

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        if value not in csv.list_dialects():
            raise ValueError(f"Unknown CSV dialect '{value}', expected one of {sorted(csv.list_dialects())}")
        return value

    @model_validator(mode="after")
    def _table_or_query(self) -> "ExportJob":
        if (self.table is None) == (self.query is None):
            raise ValueError("Exactly one of 'table' or 'query' must be set")
        return self

    def resolved(self, base_dir: Path) -> "ExportJob":
        """Return a copy with relative source and output paths anchored at `base_dir`.

        Args:
            base_dir: Directory relative paths are interpreted against.

        Returns:
            New ExportJob with absolute paths.
        """
        data_source = parse_locator(self.source)
        output = self.output if self.output.is_absolute() else base_dir / self.output
        return self.model_copy(update={"source": str(data_source.resolve(base_dir)), "output": output})


class ExportsConfig(BaseModel):
    """Configuration for all named export jobs."""

    exports: dict[str, ExportJob]

    def get_job(self, name: str) -> ExportJob:
        """Look up a job by name.

        Args:
            name: Name of the job as defined in the config.

        Returns:
            The configured ExportJob.

        Raises:
            KeyError: If name is not configured.
        """
        if name not in self.exports:
            raise KeyError(f"Export job '{name}' not found in configuration")

        return self.exports[name]

    def get_job_names(self) -> list[str]:
        """Return list of configured job names."""
        return list(self.exports.keys())


def load_exports_config(config_path: Path | None = None, base_dir: Path | None = None) -> ExportsConfig:
    """Load export jobs from a YAML file.

    Args:
        config_path: Path to the config file. Defaults to settings.exports_config_path.
        base_dir: Directory relative job paths are resolved against. Defaults to settings.project_root.

    Returns:
        Parsed ExportsConfig with absolute paths.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config file is invalid.
    """
    if config_path is None:
        config_path = settings.exports_config_path

    if base_dir is None:
        base_dir = settings.project_root

    if not config_path.exists():
        raise FileNotFoundError(f"Exports config not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid exports config {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ValueError(f"Exports config must be a mapping: {config_path}")

    config = ExportsConfig.model_validate(raw_config)
    return ExportsConfig(exports={name: job.resolved(base_dir) for name, job in config.exports.items()})
