# src/cpuwatch/cli.py
"""
cpuwatch Command Line Interface (CLI).

This module implements the user-facing terminal interface using `typer` and `rich`.
It wires the flags onto the driver loop in :mod:`cpuwatch.pipelines.monitor` and
turns typed errors into exit codes.

Features
--------
- **Live instant mode**: clear the screen every second and show the newest
  jiffy deltas plus usage percentages.
- **Live average mode**: scroll averaged deltas over the last N intervals.
- **Replay**: print records persisted to the JSON log, one or all.

Usage
-----
    # Instant mode
    $ cpuwatch

    # Average over the last 5 intervals
    $ cpuwatch --avg --times 5

    # Replay one persisted record / all of them
    $ cpuwatch --read 1700000000
    $ cpuwatch --read
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from cpuwatch.core.errors import MonitorError
from cpuwatch.core.settings import get_logger, load_settings, set_log_level
from cpuwatch.core.storage import AverageLog
from cpuwatch.pipelines.monitor import LiveConfig, run_live, run_read

# Ensure CPUWATCH_* overrides in .env are visible before settings are read
load_dotenv()

app = typer.Typer(
    help="cpuwatch: per-core CPU jiffy deltas and usage from /proc/stat.",
    rich_markup_mode="markdown",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _resolve_times(raw: str | None) -> int:
    """
    Parse ``--times``, falling back to the configured default.

    Missing, non-numeric or non-positive values all mean "use the default";
    only the latter two print a warning.
    """
    default = load_settings().avg_times
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        console.print(
            f"[yellow]Ignoring --times {escape(repr(raw))}; using the default of {default}.[/yellow]"
        )
        return default
    return value


def _fail(error: MonitorError) -> typer.Exit:
    """Report a fatal error and build the matching exit."""
    logger.error("%s", error)
    console.print(f"\n[bold red]❌ Monitor Error:[/bold red] {escape(str(error))}")
    return typer.Exit(code=1)


# --------------------------------------------------------------------------- #
# Command
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def main(
    timestamp: Annotated[
        str | None,
        typer.Argument(
            help="With `--read`: the epoch-seconds key of the record to show.",
            show_default=False,
        ),
    ] = None,
    avg: Annotated[
        bool,
        typer.Option("--avg", help="Show averaged deltas instead of the newest interval."),
    ] = False,
    times: Annotated[
        str | None,
        typer.Option(
            "--times",
            metavar="N",
            help="Number of intervals to average with `--avg` (default 10).",
            show_default=False,
        ),
    ] = None,
    read: Annotated[
        bool,
        typer.Option("--read", help="Print persisted records and exit."),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            dir_okay=False,
            help="Persistence log to write/read (default `cpu_averages.json`).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """
    Monitor CPU utilization, or replay the persisted log with `--read`.
    """
    if verbose:
        set_log_level("DEBUG")

    log = AverageLog(log_file)

    if read:
        replayed = run_read(console, log, timestamp)
        if replayed.is_err():
            failure = replayed.unwrap_err()
            if not failure.is_fatal:
                console.print(failure.message, markup=False, highlight=False)
                return
            raise _fail(failure)
        if replayed.unwrap() == 0:
            console.print(f"[dim]No records in {escape(str(log.path))}.[/dim]")
        return

    if timestamp is not None:
        raise typer.BadParameter("a TIMESTAMP is only accepted together with --read")

    config = LiveConfig(average=avg, times=_resolve_times(times), log_path=log.path)
    try:
        outcome = run_live(console, config, log=log)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
        return

    if outcome.is_err():
        raise _fail(outcome.unwrap_err())


if __name__ == "__main__":
    app()
