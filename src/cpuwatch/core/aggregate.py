"""
Aggregator: reduce a history window to one tick's table of deltas.

Modes
-----
- **Instant**: the newest pair only, plus a usage percentage per entity.
- **Average**: the newest ``min(times, len(window) - 1)`` pairs, summed per
  field and divided by the number of pairs (truncating toward zero). No
  percentages are produced in this mode.

Usage percentage
----------------
``usage = (1 - (idle + iowait) / total) * 100`` where ``total`` is the sum of
all ten delta fields. A zero ``total`` (two reads inside the same jiffy)
reports ``0.0`` rather than a NaN/inf.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cpuwatch.core.contracts.counters import (
    FIELD_COUNT,
    IDLE,
    IOWAIT,
    AggregateRecord,
    DeltaVector,
)
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok
from cpuwatch.core.sampling.delta import SnapshotDelta, snapshot_delta
from cpuwatch.core.sampling.window import HistoryWindow


@dataclass(frozen=True, slots=True)
class Aggregation:
    """
    Result of aggregating one window.

    Attributes
    ----------
    cpu : DeltaVector
        Aggregate delta (or averaged delta).
    cores : tuple[DeltaVector, ...]
        Per-core deltas (or averages), core index = position.
    pairs_used : int
        Number of snapshot pairs that contributed.
    averaged : bool
        True in average mode.
    cpu_usage : float | None
        Aggregate usage percentage; instant mode only.
    core_usage : tuple[float, ...]
        Per-core usage percentages; empty in average mode.
    """

    cpu: DeltaVector
    cores: tuple[DeltaVector, ...]
    pairs_used: int
    averaged: bool
    cpu_usage: float | None = None
    core_usage: tuple[float, ...] = field(default_factory=tuple)

    def to_record(self) -> AggregateRecord:
        """Convert to the persisted JSON shape."""
        return AggregateRecord.from_vectors(self.cpu, self.cores)


def usage_percent(values: DeltaVector) -> float:
    """Share of non-idle time in ``values``, as a percentage."""
    total = sum(values)
    if total == 0:
        return 0.0
    idle = values[IDLE] + values[IOWAIT]
    return (1.0 - idle / total) * 100.0


def _trunc_div(total: int, count: int) -> int:
    """Integer division truncating toward zero (``//`` floors negatives)."""
    quotient = abs(total) // count
    return -quotient if total < 0 else quotient


def _insufficient(window: HistoryWindow) -> MonitorError:
    return MonitorError(
        ErrorKind.INSUFFICIENT_DATA,
        f"need at least 2 snapshots, window holds {len(window)}",
    )


def aggregate_instant(window: HistoryWindow) -> Result[Aggregation, MonitorError]:
    """Diff the newest pair and derive usage percentages."""
    if not window.has_enough_data():
        return err(_insufficient(window))

    previous, current = window.latest_pairs(1)[0]
    diff = snapshot_delta(previous, current)
    if diff.is_err():
        return err(diff.unwrap_err())

    d = diff.unwrap()
    return ok(
        Aggregation(
            cpu=d.cpu,
            cores=d.cores,
            pairs_used=1,
            averaged=False,
            cpu_usage=usage_percent(d.cpu),
            core_usage=tuple(usage_percent(c) for c in d.cores),
        )
    )


def aggregate_average(window: HistoryWindow, times: int) -> Result[Aggregation, MonitorError]:
    """Average the newest ``times`` pair deltas field by field."""
    if not window.has_enough_data():
        return err(_insufficient(window))

    deltas: list[SnapshotDelta] = []
    for previous, current in window.latest_pairs(min(times, len(window) - 1)):
        diff = snapshot_delta(previous, current)
        if diff.is_err():
            return err(diff.unwrap_err())
        deltas.append(diff.unwrap())

    if not deltas:
        return err(_insufficient(window))

    # snapshot_delta rejects core-count changes, so every pair has this shape.
    core_count = len(deltas[0].cores)
    cpu_sum = [0] * FIELD_COUNT
    core_sums = [[0] * FIELD_COUNT for _ in range(core_count)]
    for d in deltas:
        for i, value in enumerate(d.cpu):
            cpu_sum[i] += value
        for j, core in enumerate(d.cores):
            for i, value in enumerate(core):
                core_sums[j][i] += value

    n = len(deltas)
    return ok(
        Aggregation(
            cpu=tuple(_trunc_div(v, n) for v in cpu_sum),
            cores=tuple(tuple(_trunc_div(v, n) for v in core) for core in core_sums),
            pairs_used=n,
            averaged=True,
        )
    )


def aggregate(window: HistoryWindow, average: bool, times: int) -> Result[Aggregation, MonitorError]:
    """Dispatch to :func:`aggregate_average` or :func:`aggregate_instant`."""
    if average:
        return aggregate_average(window, times)
    return aggregate_instant(window)


__all__ = [
    "Aggregation",
    "aggregate",
    "aggregate_average",
    "aggregate_instant",
    "usage_percent",
]
