"""
Snapshot Reader: turn the kernel's ``/proc/stat`` text into a :class:`Snapshot`.

Format
------
The first line is the aggregate, ``cpu`` followed by whitespace-separated
jiffy counters. It is followed by zero or more ``cpuN`` lines, one per core,
and then unrelated lines (``intr``, ``ctxt``, ...)::

    cpu  4705 356 584 3699 23 23 0 0 0 0
    cpu0 1393 280 235 1792 10 17 0 0 0 0
    intr 114930548 113199788 3 0 5 ...

Only the first :data:`FIELD_COUNT` counters of a line are used; older kernels
that report fewer are rejected as a parse error.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from pathlib import Path

from cpuwatch.core.contracts.counters import FIELD_COUNT, CounterVector, Snapshot
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok
from cpuwatch.core.settings import get_logger, load_settings

logger = get_logger(__name__)

_CORE_LABEL = re.compile(r"^cpu\d+$")


def _parse_counters(line: str, lineno: int) -> Result[CounterVector, MonitorError]:
    """Parse one labelled counter line, skipping the label."""
    fields = line.split()[1:]
    if len(fields) < FIELD_COUNT:
        return err(
            MonitorError(
                ErrorKind.PARSE,
                f"line {lineno}: expected {FIELD_COUNT} counters, got {len(fields)}",
            )
        )
    if len(fields) > FIELD_COUNT:
        logger.debug("line %d: ignoring %d extra counters", lineno, len(fields) - FIELD_COUNT)

    values: list[int] = []
    for raw in fields[:FIELD_COUNT]:
        # isdigit() rejects signs and decimals: counters are unsigned
        if not (raw.isascii() and raw.isdigit()):
            return err(MonitorError(ErrorKind.PARSE, f"line {lineno}: bad counter {raw!r}"))
        values.append(int(raw))
    return ok(tuple(values))


def parse_stat(text: str, timestamp: float) -> Result[Snapshot, MonitorError]:
    """
    Parse a counter-source dump into a snapshot stamped with ``timestamp``.

    Parameters
    ----------
    text : str
        Full contents of the counter source.
    timestamp : float
        Epoch seconds to attach to the snapshot.

    Returns
    -------
    Result[Snapshot, MonitorError]
        ``Err(PARSE)`` for empty input, short lines or malformed counters.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        return err(MonitorError(ErrorKind.PARSE, "counter source is empty"))

    aggregate = _parse_counters(lines[0], 1)
    if aggregate.is_err():
        return err(aggregate.unwrap_err())

    cores: list[CounterVector] = []
    for lineno, line in enumerate(lines[1:], start=2):
        label = line.split(maxsplit=1)[0] if line.strip() else ""
        if not _CORE_LABEL.match(label):
            break
        core = _parse_counters(line, lineno)
        if core.is_err():
            return err(core.unwrap_err())
        cores.append(core.unwrap())

    return ok(Snapshot(timestamp=timestamp, aggregate=aggregate.unwrap(), cores=tuple(cores)))


def read_snapshot(
    path: Path | None = None,
    clock: Callable[[], float] = time.time,
) -> Result[Snapshot, MonitorError]:
    """Read the counter source (``settings.stat_path`` by default) right now."""
    source = path if path is not None else load_settings().stat_path
    try:
        text = source.read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        return err(MonitorError(ErrorKind.IO, f"cannot read {source}: {exc}"))
    return parse_stat(text, clock())


__all__ = ["parse_stat", "read_snapshot"]
