"""Delta Engine: field-wise signed differences between counter vectors.

Deltas are never clamped. A counter that went backwards (reboot, wrapped
source) shows up as a negative value.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpuwatch.core.contracts.counters import CounterVector, DeltaVector, Snapshot
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok


@dataclass(frozen=True, slots=True)
class SnapshotDelta:
    """Aggregate and per-core deltas between two snapshots."""

    cpu: DeltaVector
    cores: tuple[DeltaVector, ...]


def delta(previous: CounterVector, current: CounterVector) -> Result[DeltaVector, MonitorError]:
    """Return ``current[i] - previous[i]`` for every field."""
    if len(previous) != len(current):
        return err(
            MonitorError(
                ErrorKind.SHAPE_MISMATCH,
                f"cannot diff vectors of length {len(previous)} and {len(current)}",
            )
        )
    return ok(tuple(c - p for p, c in zip(previous, current, strict=True)))


def snapshot_delta(previous: Snapshot, current: Snapshot) -> Result[SnapshotDelta, MonitorError]:
    """Diff two snapshots; a changed core count is a shape mismatch."""
    if previous.core_count != current.core_count:
        return err(
            MonitorError(
                ErrorKind.SHAPE_MISMATCH,
                f"core count changed from {previous.core_count} to {current.core_count}",
            )
        )

    cpu = delta(previous.aggregate, current.aggregate)
    if cpu.is_err():
        return err(cpu.unwrap_err())

    cores: list[DeltaVector] = []
    for prev_core, curr_core in zip(previous.cores, current.cores, strict=True):
        core = delta(prev_core, curr_core)
        if core.is_err():
            return err(core.unwrap_err())
        cores.append(core.unwrap())

    return ok(SnapshotDelta(cpu=cpu.unwrap(), cores=tuple(cores)))


__all__ = ["SnapshotDelta", "delta", "snapshot_delta"]
