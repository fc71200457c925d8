# ABOUTME: Tests for the Typer command line interface.
# ABOUTME: Verifies export, jobs, and tables commands and their error exits.

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tabledump.cli import app

runner = CliRunner()


@pytest.fixture
def exports_config(tmp_path: Path, people_db: Path) -> Path:
    """exports.yml pointing at the people database."""
    config_path = tmp_path / "exports.yml"
    config_path.write_text(
        f"""
exports:
  people:
    description: "Everyone"
    source: "sqlite://{people_db}"
    table: "people"
    output: "{tmp_path / 'people.csv'}"
"""
    )
    return config_path


class TestExportCommand:
    """Tests for the export command."""

    def test_ad_hoc_table_export(self, people_db: Path, tmp_path: Path) -> None:
        """Source, table, and output on the command line run an export."""
        output = tmp_path / "out.csv"

        result = runner.invoke(app, ["export", "--source", str(people_db), "--table", "people", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Exported 2 rows" in result.output
        assert output.read_bytes() == b"id,name\r\n1,Ann\r\n2,Bo\r\n"

    def test_ad_hoc_query_with_dialect(self, people_db: Path, tmp_path: Path) -> None:
        """Query and dialect options are passed through."""
        output = tmp_path / "out.csv"

        result = runner.invoke(
            app,
            [
                "export",
                "-s",
                str(people_db),
                "-q",
                "SELECT name FROM people ORDER BY id",
                "-o",
                str(output),
                "--dialect",
                "unix",
            ],
        )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b'"name"\n"Ann"\n"Bo"\n'

    def test_configured_job(self, exports_config: Path, tmp_path: Path) -> None:
        """A job name runs the configured export."""
        result = runner.invoke(app, ["export", "people", "--config", str(exports_config)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "people.csv").read_bytes() == b"id,name\r\n1,Ann\r\n2,Bo\r\n"

    def test_configured_job_with_overrides(self, exports_config: Path, tmp_path: Path) -> None:
        """Command-line options override the job, a query replacing its table."""
        output = tmp_path / "override.csv"

        result = runner.invoke(
            app,
            [
                "export",
                "people",
                "-c",
                str(exports_config),
                "-q",
                "SELECT id FROM people WHERE name = 'Bo'",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"id\r\n2\r\n"
        assert not (tmp_path / "people.csv").exists()

    def test_verbose_prints_progress(self, people_db: Path, tmp_path: Path) -> None:
        """Verbose mode prints pipeline progress."""
        result = runner.invoke(
            app,
            ["export", "-s", str(people_db), "-t", "people", "-o", str(tmp_path / "o.csv"), "--verbose"],
        )

        assert result.exit_code == 0, result.output
        assert "Connecting to" in result.output

    def test_missing_source_option(self, tmp_path: Path) -> None:
        """Without a job, --source and --output are required."""
        result = runner.invoke(app, ["export", "--table", "people", "-o", str(tmp_path / "o.csv")])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unknown_job(self, exports_config: Path) -> None:
        """An unknown job name exits with an error."""
        result = runner.invoke(app, ["export", "nobody", "-c", str(exports_config)])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_database(self, tmp_path: Path) -> None:
        """A missing database file exits with an error."""
        result = runner.invoke(
            app, ["export", "-s", str(tmp_path / "nope.sqlite"), "-t", "people", "-o", str(tmp_path / "o.csv")]
        )

        assert result.exit_code == 1
        assert "Database not found" in result.output

    def test_malformed_config(self, tmp_path: Path) -> None:
        """A YAML syntax error in the job config exits with an error."""
        config_path = tmp_path / "exports.yml"
        config_path.write_text("exports:\n  a: [unclosed\n")

        result = runner.invoke(app, ["export", "a", "-c", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid exports config" in result.output

    def test_sql_error(self, people_db: Path, tmp_path: Path) -> None:
        """Driver errors are reported as a failed export."""
        output = tmp_path / "o.csv"

        result = runner.invoke(app, ["export", "-s", str(people_db), "-t", "ghosts", "-o", str(output)])

        assert result.exit_code == 1
        assert "Export failed:" in result.output
        assert not output.exists()


class TestJobsCommand:
    """Tests for the jobs command."""

    def test_lists_jobs(self, exports_config: Path) -> None:
        """Configured jobs are listed."""
        result = runner.invoke(app, ["jobs", "-c", str(exports_config)])

        assert result.exit_code == 0, result.output
        assert "people" in result.output
        assert "Everyone" in result.output

    def test_no_jobs(self, tmp_path: Path) -> None:
        """An empty config says so."""
        config_path = tmp_path / "exports.yml"
        config_path.write_text("exports: {}\n")

        result = runner.invoke(app, ["jobs", "-c", str(config_path)])

        assert result.exit_code == 0
        assert "No export jobs configured" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        """A missing config file exits with an error."""
        result = runner.invoke(app, ["jobs", "-c", str(tmp_path / "missing.yml")])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_malformed_config(self, tmp_path: Path) -> None:
        """A YAML syntax error exits with an error."""
        config_path = tmp_path / "exports.yml"
        config_path.write_text("exports:\n  a: [unclosed\n")

        result = runner.invoke(app, ["jobs", "-c", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid exports config" in result.output


class TestTablesCommand:
    """Tests for the tables command."""

    def test_lists_tables(self, people_db: Path) -> None:
        """Tables in the database are printed."""
        result = runner.invoke(app, ["tables", str(people_db)])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "people"

    def test_missing_database(self, tmp_path: Path) -> None:
        """A missing database exits with an error."""
        result = runner.invoke(app, ["tables", str(tmp_path / "nope.sqlite")])

        assert result.exit_code == 1
        assert "Database not found" in result.output

    @pytest.mark.parametrize("name", ["junk.sqlite", "junk.duckdb"])
    def test_not_a_database(self, tmp_path: Path, name: str) -> None:
        """A file the driver can't read exits with an error instead of a traceback."""
        junk = tmp_path / name
        junk.write_bytes(b"this is not a database file\n" * 200)

        result = runner.invoke(app, ["tables", str(junk)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
