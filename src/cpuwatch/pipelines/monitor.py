"""
Driver loop: sample, aggregate, render and persist on a fixed cadence.

Flow Overview
-------------
**Live mode** (:func:`run_live`), once per tick:

1. Read a snapshot from the counter source.
2. Append it to the :class:`HistoryWindow` (evicting the oldest).
3. Clear the screen, unless averaging (so averaged readings scroll).
4. Aggregate the window (instant pair or N-pair average).
5. Render the tables, or a "not enough data" notice on the first tick.
6. Persist the aggregation under the current epoch seconds.
7. Sleep whatever is left of the 1 second tick; overruns start the next
   tick immediately, without catch-up.

**Read mode** (:func:`run_read`) skips sampling and replays the persistence
log, one record or all of them.

The window, log, clock, sleeper and reader are all passed in, so the loop can
run against synthetic snapshots in tests.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from cpuwatch.core.aggregate import aggregate
from cpuwatch.core.contracts.counters import Snapshot
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok
from cpuwatch.core.sampling.reader import read_snapshot
from cpuwatch.core.sampling.window import HistoryWindow
from cpuwatch.core.settings import DEFAULT_AVG_TIMES, SAMPLE_INTERVAL_S, get_logger
from cpuwatch.core.storage import AverageLog
from cpuwatch.render import NOT_ENOUGH_DATA, render_aggregation, render_record

logger = get_logger(__name__)

SnapshotReader = Callable[[], Result[Snapshot, MonitorError]]


@dataclass(frozen=True, slots=True)
class LiveConfig:
    """
    Options for :func:`run_live`.

    Attributes
    ----------
    average : bool
        Average the last ``times`` intervals instead of showing the newest one.
    times : int
        Averaging window, in intervals.
    log_path : Path | None
        Persistence log; ``None`` uses the configured default.
    """

    average: bool = False
    times: int = DEFAULT_AVG_TIMES
    log_path: Path | None = None


def _epoch_key(now: float) -> str:
    return str(int(now))


def run_tick(
    console: Console,
    window: HistoryWindow,
    log: AverageLog,
    config: LiveConfig,
    reader: SnapshotReader,
    clock: Callable[[], float] = time.time,
) -> Result[bool, MonitorError]:
    """
    Execute one tick (steps 1-6). Returns ``Ok(True)`` if a record was stored.

    Only fatal errors (I/O, parse, shape mismatch) come back as ``Err``; a
    window that is still filling up prints the notice and returns ``Ok(False)``.
    """
    snapshot = reader()
    if snapshot.is_err():
        return err(snapshot.unwrap_err())
    window.append(snapshot.unwrap())

    if not config.average:
        console.clear()

    result = aggregate(window, config.average, config.times)
    if result.is_err():
        failure = result.unwrap_err()
        if failure.kind is ErrorKind.INSUFFICIENT_DATA:
            console.print(NOT_ENOUGH_DATA, markup=False, highlight=False)
            return ok(False)
        return err(failure)

    aggregation = result.unwrap()
    render_aggregation(console, aggregation)

    key = _epoch_key(clock())
    stored = log.append(key, aggregation.to_record())
    if stored.is_err():
        return err(stored.unwrap_err())
    logger.debug("Tick %s: %d pair(s) aggregated and stored", key, aggregation.pairs_used)
    return ok(True)


def run_live(
    console: Console,
    config: LiveConfig,
    reader: SnapshotReader | None = None,
    log: AverageLog | None = None,
    clock: Callable[[], float] = time.time,
    monotonic: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    max_ticks: int | None = None,
) -> Result[int, MonitorError]:
    """
    Run the sampling loop until interrupted (or ``max_ticks`` ticks).

    Returns
    -------
    Result[int, MonitorError]
        The number of completed ticks, or the first fatal error.
    """
    window = HistoryWindow.for_mode(config.average, config.times)
    log = log if log is not None else AverageLog(config.log_path)
    reader = reader if reader is not None else read_snapshot

    logger.info(
        "Sampling every %.0fs (%s mode, log: %s)",
        SAMPLE_INTERVAL_S,
        f"average over {config.times}" if config.average else "instant",
        log.path,
    )

    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        started = monotonic()

        outcome = run_tick(console, window, log, config, reader, clock)
        if outcome.is_err():
            return err(outcome.unwrap_err())
        ticks += 1

        elapsed = monotonic() - started
        if elapsed < SAMPLE_INTERVAL_S:
            sleep(SAMPLE_INTERVAL_S - elapsed)
        else:
            logger.debug("Tick overran by %.3fs; not sleeping", elapsed - SAMPLE_INTERVAL_S)

    return ok(ticks)


def run_read(
    console: Console,
    log: AverageLog,
    key: str | None = None,
) -> Result[int, MonitorError]:
    """
    Replay persisted records: the one stored under ``key``, or all of them.

    ``Err(NOT_FOUND)`` is returned (not printed) for an absent key so the CLI
    can decide how to report it.
    """
    if key is not None:
        found = log.read_one(key)
        if found.is_err():
            return err(found.unwrap_err())
        records = [found.unwrap()]
    else:
        loaded = log.read_all()
        if loaded.is_err():
            return err(loaded.unwrap_err())
        records = loaded.unwrap()

    for record_key, record in records:
        shown = render_record(console, record_key, record)
        if shown.is_err():
            return err(shown.unwrap_err())

    logger.debug("Replayed %d record(s) from %s", len(records), log.path)
    return ok(len(records))


__all__ = ["LiveConfig", "SnapshotReader", "run_live", "run_read", "run_tick"]
