"""CLI entrypoint for ledger-stats."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .logger import setup_logging
from .settings import CONFIG_ENV_VAR, OutputFormat, StatsSettings

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Supply, depositor and transfer statistics for the ledger.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("ledger_stats")


@app.callback(invoke_without_command=True)
def report(
    database: Annotated[
        str | None,
        typer.Option(
            "--database",
            "-d",
            help="Postgres connection URL of the indexer database.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [ledger_stats] table).",
        ),
    ] = None,
    registry_path: Annotated[
        Path | None,
        typer.Option(
            "--registry",
            help="Asset registry JSON to use instead of the bundled one.",
        ),
    ] = None,
    output: Annotated[
        OutputFormat | None,
        typer.Option(
            "--output",
            "-o",
            help="Output format: table, json (raw figures) or formatted-json.",
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            help="Seconds to wait for all aggregates; 0 disables the deadline.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Collect the aggregate statistics and print them.

    Loads configuration, validates it, loads the asset registry and queries
    the database once.
    """
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if database is not None:
        init_kwargs["database_url"] = database
    if registry_path is not None:
        init_kwargs["registry_path"] = registry_path
    if output is not None:
        init_kwargs["output"] = output
    if timeout is not None:
        init_kwargs["fetch_timeout_seconds"] = timeout
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = StatsSettings(**init_kwargs)

    setup_logging(settings.log_level)
    logger = _build_logger()

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    if not settings.database_url:
        raise typer.BadParameter(
            "database_url must be configured",
            param_hint=["--database", "LEDGER_STATS_DATABASE_URL"],
        )

    from .pipeline.run import run_report

    asyncio.run(run_report(settings, logger))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
