# src/cpuwatch/render.py
"""
Renderer: fixed-width jiffy tables for the terminal.

The ``format_*`` helpers are pure and return lines of text, so tests can check
them without a terminal. The ``render_*`` helpers print those lines through a
Rich :class:`~rich.console.Console` with markup and highlighting disabled, so
the column alignment is exactly what the formatter produced.

Layout
------
    CPU time differences (jiffies):
    CPU         user       nice     system ...  guest_nice
    cpu           10          0         10 ...           0
    cpu0           6          0          4 ...           0
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from rich.console import Console

from cpuwatch.core.aggregate import Aggregation
from cpuwatch.core.contracts.counters import FIELD_NAMES, AggregateRecord
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok

LABEL_WIDTH = 5
COLUMN_WIDTH = 11

NOT_ENOUGH_DATA = "Not enough stored values to print differences."


def _label(text: str) -> str:
    return f"{text:<{LABEL_WIDTH}}"


def core_label(index: int) -> str:
    return f"cpu{index}"


def format_delta_table(
    cpu: Sequence[int],
    cores: Sequence[Sequence[int]],
    averaged: bool = False,
) -> list[str]:
    """Title, header and one right-aligned row per entity."""
    title = "CPU time differences (jiffies)" + (" (average)" if averaged else "") + ":"
    lines = [title, _label("CPU") + "".join(f"{name:>{COLUMN_WIDTH}}" for name in FIELD_NAMES)]
    rows = [("cpu", cpu)] + [(core_label(i), core) for i, core in enumerate(cores)]
    for label, values in rows:
        lines.append(_label(label) + "".join(f"{v:>{COLUMN_WIDTH}}" for v in values))
    return lines


def format_usage_table(cpu_pct: float, core_pcts: Sequence[float]) -> list[str]:
    """Usage percentages to two decimals, aggregate first."""
    lines = ["CPU Usage Percentages:", _label("CPU") + f"{'Usage %':>{COLUMN_WIDTH}}"]
    rows = [("cpu", cpu_pct)] + [(core_label(i), pct) for i, pct in enumerate(core_pcts)]
    for label, pct in rows:
        lines.append(_label(label) + f"{pct:>{COLUMN_WIDTH - 1}.2f}%")
    return lines


def format_timestamp(key: str) -> Result[str, MonitorError]:
    """Turn a log key (epoch seconds) into local ``YYYY-MM-DD HH:MM:SS``."""
    try:
        moment = datetime.fromtimestamp(int(key))
    except (ValueError, OverflowError, OSError) as exc:
        return err(MonitorError(ErrorKind.PARSE, f"invalid timestamp key {key!r}: {exc}"))
    return ok(moment.strftime("%Y-%m-%d %H:%M:%S"))


def _emit(console: Console, lines: list[str]) -> None:
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)


def render_aggregation(console: Console, aggregation: Aggregation) -> None:
    """Print one live tick: delta table, plus usage table in instant mode."""
    _emit(console, format_delta_table(aggregation.cpu, aggregation.cores, aggregation.averaged))
    console.print()
    if not aggregation.averaged and aggregation.cpu_usage is not None:
        _emit(console, format_usage_table(aggregation.cpu_usage, aggregation.core_usage))
        console.print()


def render_record(console: Console, key: str, record: AggregateRecord) -> Result[None, MonitorError]:
    """Print one persisted record under its human-readable timestamp."""
    when = format_timestamp(key)
    if when.is_err():
        return err(when.unwrap_err())
    console.print()
    console.print(f"{when.unwrap()}:", markup=False, highlight=False)
    _emit(console, format_delta_table(record.cpu, record.cores))
    return ok(None)


__all__ = [
    "NOT_ENOUGH_DATA",
    "format_delta_table",
    "format_timestamp",
    "format_usage_table",
    "render_aggregation",
    "render_record",
]
