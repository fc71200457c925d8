"""ABOUTME: CLI entry point for tabledump commands.
ABOUTME: Provides export, jobs, and tables commands via Typer."""

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tabledump.config import ExportJob, load_exports_config
from tabledump.export import run_export
from tabledump.export.drivers import connect, parse_locator
from tabledump.export.query import list_tables
from tabledump.logs import init_logging
from tabledump.settings import settings

app = typer.Typer(
    name="tabledump",
    help="Export database query results to CSV.",
    no_args_is_help=True,
)

console = Console()


def _message(e: Exception) -> str:
    """Return a printable message, without the quotes KeyError adds."""
    if isinstance(e, KeyError) and e.args:
        return escape(str(e.args[0]))
    return escape(str(e))


def _fail(label: str, e: Exception) -> typer.Exit:
    console.print(f"[red]{label}[/] {_message(e)}")
    return typer.Exit(1)


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Log level for tabledump messages, e.g. INFO"),
) -> None:
    """Export database query results to CSV."""
    if not settings.logging_config_path.exists():
        return
    try:
        init_logging(settings.logging_config_path, level=log_level)
    except ValueError as e:
        raise _fail("Error:", e) from None


def _build_job(
    job_name: str | None,
    config_path: Path | None,
    overrides: dict[str, Any],
) -> ExportJob:
    """Combine a configured job (if any) with command-line overrides."""
    given = {key: value for key, value in overrides.items() if value is not None}

    if job_name is None:
        if "source" not in given or "output" not in given:
            raise ValueError("Without a job name, --source and --output are required")
        return ExportJob.model_validate(given).resolved(Path.cwd())

    base = load_exports_config(config_path).get_job(job_name).model_dump()
    if "table" in given:
        base["query"] = None
    if "query" in given:
        base["table"] = None
    base.update(given)
    return ExportJob.model_validate(base).resolved(Path.cwd())


@app.command()
def export(
    job_name: str | None = typer.Argument(None, metavar="JOB", help="Name of a job in the exports config"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to exports.yml"),
    source: str | None = typer.Option(None, "--source", "-s", help="Data-source locator, e.g. sqlite:///app.db"),
    table: str | None = typer.Option(None, "--table", "-t", help="Export every row of this table"),
    query: str | None = typer.Option(None, "--query", "-q", help="Export the result of this SQL query"),
    output: Path | None = typer.Option(None, "--output", "-o", help="CSV file to write"),
    dialect: str | None = typer.Option(None, "--dialect", "-d", help="CSV dialect: excel, excel-tab or unix"),
    delimiter: str | None = typer.Option(None, "--delimiter", help="Override the dialect's delimiter"),
    encoding: str | None = typer.Option(None, "--encoding", help="Output file encoding"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Run a query against a database file and write the result to CSV."""

    def log(msg: str) -> None:
        if verbose:
            console.print(f"[blue]{escape(msg)}[/]")

    overrides = {
        "source": source,
        "table": table,
        "query": query,
        "output": output,
        "dialect": dialect,
        "delimiter": delimiter,
        "encoding": encoding,
    }

    try:
        job = _build_job(job_name, config, overrides)
    except (FileNotFoundError, KeyError, ValueError) as e:
        raise _fail("Error:", e) from None

    try:
        result = run_export(job, verbose_callback=log)
    except (FileNotFoundError, KeyError, ValueError) as e:
        raise _fail("Error:", e) from None
    except Exception as e:
        raise _fail("Export failed:", e) from None

    console.print(f"[green]Exported {result.row_count} rows:[/] {escape(str(result.output_path))}")


@app.command()
def jobs(
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to exports.yml"),
) -> None:
    """List the export jobs defined in the exports config."""
    try:
        exports_config = load_exports_config(config)
    except (FileNotFoundError, ValueError) as e:
        raise _fail("Error:", e) from None

    names = exports_config.get_job_names()
    if not names:
        console.print("[yellow]No export jobs configured.[/]")
        return

    table = Table("Job", "Description", "Output")
    for name in names:
        job = exports_config.get_job(name)
        table.add_row(escape(name), escape(job.description), escape(job.output.name))
    console.print(table)


@app.command()
def tables(
    source: str = typer.Argument(..., help="Data-source locator, e.g. sqlite:///app.db"),
) -> None:
    """List the tables in a database file."""
    try:
        data_source = parse_locator(source)
        conn = connect(data_source)
    except (FileNotFoundError, KeyError, ValueError) as e:
        raise _fail("Error:", e) from None
    except Exception as e:
        raise _fail("Error: could not open database:", e) from None

    try:
        names = list_tables(conn, data_source.scheme)
    except KeyError as e:
        raise _fail("Error:", e) from None
    except Exception as e:
        raise _fail("Error: could not list tables:", e) from None
    finally:
        conn.close()

    for name in names:
        console.print(escape(name))


if __name__ == "__main__":
    app()
