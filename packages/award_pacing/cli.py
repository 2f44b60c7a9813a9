# ruff: noqa: I001
"""CLI for the ``award_pacing`` package.

This module exposes a callable command handler (:func:`cmd_monitor`) and a
Typer-based console interface. Environment variables (``DATABASE_URL``,
``GS_DB_*``, ``AWARD_PACING_LOG_LEVEL``) are loaded from a local ``.env`` using
``python-dotenv`` before delegating to command logic. Business logic lives in
``award_pacing.api`` and related modules.
"""

from __future__ import annotations

import csv
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import configure_logging, get_logger

_logger = get_logger("award_pacing.cli")


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def cmd_monitor(
    csv_path: str,
    *,
    budget: str,
    period: str = "month",
    period_weights: str | None = None,
    projection_periods: int = 0,
    start_date: str | None = None,
    end_date: str | None = None,
    categories: str | None = None,
    cohorts: str | None = None,
    category_targets: str | None = None,
    cohort_targets: str | None = None,
    export_json: Path | None = None,
    db_sync: bool = False,
    db_schema: str | None = None,
    database_url: str | None = None,
) -> int:
    """Load, summarize and report on an award CSV; optionally export and sync.

    Returns a process exit code. ``0`` on success and when there is nothing to
    report; ``1`` after printing ``Error: ...`` to stderr otherwise.
    """

    # Deferred imports to keep CLI startup fast
    from rich.console import Console
    from sqlalchemy.exc import SQLAlchemyError

    from .api import summarize
    from .config import ConfigError, build_config
    from .ingest.utils import load_records_from_csv
    from .report import render_report

    try:
        config = build_config(
            budget=budget,
            period=period,
            period_weights=period_weights,
            projection_periods=projection_periods,
            start_date=start_date,
            end_date=end_date,
            categories=categories,
            cohorts=cohorts,
            category_targets=category_targets,
            cohort_targets=cohort_targets,
            export_path=export_json,
            db_sync=db_sync,
            db_schema=db_schema,
        )
    except ConfigError as e:
        return _error(str(e))

    try:
        records = load_records_from_csv(csv_path)
    except FileNotFoundError:
        return _error(f"File not found: {csv_path}")
    except PermissionError:
        return _error(f"Permission denied: {csv_path}")
    except (csv.Error, UnicodeDecodeError) as e:
        return _error(f"Failed to parse CSV: {e}")
    except OSError as e:
        return _error(f"Unexpected failure reading '{csv_path}': {e}")

    if not records:
        print("No award records found.")
        return 0

    summary = summarize(records, config)
    if summary is None:
        print("No award records found after applying filters.")
        return 0

    render_report(summary, config, Console())

    if config.export_path is not None:
        from .export import build_export_payload, write_export

        try:
            payload = build_export_payload(summary, config, datetime.now(UTC))
            written = write_export(payload, config.export_path)
        except OSError as e:
            return _error(f"export failed: {e}")
        print("")
        print(f"Exported JSON report to {written}")

    if config.db_sync:
        from pacing_db.client import ensure_schema, resolve_schema, session_scope

        from .persistence import sync_snapshot

        try:
            schema = resolve_schema(config.db_schema)
            with session_scope(database_url=database_url, schema=schema) as session:
                ensure_schema(session, schema)
                snapshot_id = sync_snapshot(session, summary, config)
        except (RuntimeError, SQLAlchemyError) as e:
            return _error(f"database sync failed: {e}")
        _logger.info("cli:db_sync snapshot=%s schema=%s", snapshot_id, schema)
        print("")
        print("Synced report snapshot to database.")

    return 0


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Monitor scholarship award spend against an annual budget. "
        "Loads DATABASE_URL / GS_DB_* settings from a local .env before running."
    ),
)


# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--file",
    help="Path to an award CSV (date,amount[,category[,cohort]])",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)


@app.command("monitor")
def monitor_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    budget: str = typer.Option(..., "--budget", help="Annual budget (positive number)."),
    period: str = typer.Option("month", "--period", help="Reporting period: month or quarter."),
    period_weights: str | None = typer.Option(
        None,
        "--period-weights",
        help="Comma list of 12 (month) or 4 (quarter) seasonality weights.",
    ),
    projection_periods: int = typer.Option(
        0, "--projection-periods", min=0, help="Number of future periods to project."
    ),
    start_date: str | None = typer.Option(
        None, "--start-date", help="Only include awards on or after YYYY-MM-DD."
    ),
    end_date: str | None = typer.Option(
        None, "--end-date", help="Only include awards on or before YYYY-MM-DD."
    ),
    categories: str | None = typer.Option(
        None, "--category", help="Comma list of categories to include (case-insensitive)."
    ),
    cohorts: str | None = typer.Option(
        None, "--cohort", help="Comma list of cohorts to include (case-insensitive)."
    ),
    category_targets: str | None = typer.Option(
        None,
        "--category-targets",
        help="Comma list of name=share (0-1 or percent), e.g. Tuition=0.6,Stipend=40.",
    ),
    cohort_targets: str | None = typer.Option(
        None, "--cohort-targets", help="Comma list of name=share for cohorts."
    ),
    export_json: Path | None = typer.Option(
        None, "--export-json", help="Write the report as JSON to this path."
    ),
    db_sync: bool = typer.Option(
        False, "--db-sync", help="Persist a report snapshot to the database."
    ),
    db_schema: str | None = typer.Option(
        None,
        "--db-schema",
        help="Database schema (falls back to GS_DB_SCHEMA, then award_pacing_monitor).",
    ),
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env vars)."
    ),
) -> None:
    """Summarize award pacing for a CSV and print the report."""

    code = cmd_monitor(
        str(csv_path),
        budget=budget,
        period=period,
        period_weights=period_weights,
        projection_periods=projection_periods,
        start_date=start_date,
        end_date=end_date,
        categories=categories,
        cohorts=cohorts,
        category_targets=category_targets,
        cohort_targets=cohort_targets,
        export_json=export_json,
        db_sync=db_sync,
        db_schema=db_schema,
        database_url=database_url,
    )
    if code:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (falls back to AWARD_PACING_LOG_LEVEL)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m award_pacing.cli`
    app()
