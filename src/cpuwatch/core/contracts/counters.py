"""
Counter contracts shared by the sampling engine, renderer and persistence log.

This module defines the shapes that flow through the monitor:

- ``CounterVector`` / ``DeltaVector``: fixed-length int tuples in
  :data:`FIELD_NAMES` order. Field order is fixed and never reindexed.
- :class:`Snapshot`: one timestamped read of the counter source.
- :class:`AggregateRecord`: the persisted, JSON-facing form of one tick's
  result (Pydantic v2, validated on the way in from disk).

Design Notes
------------
- **Immutability**: snapshots are frozen dataclasses, like every other value
  kept inside the history window.
- **Field count**: :data:`FIELD_COUNT` is validated wherever vectors enter the
  system (parser and log reader) instead of being assumed by indexing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Final

from pydantic import BaseModel, Field

FIELD_NAMES: Final = (
    "user",
    "nice",
    "system",
    "idle",
    "iowait",
    "irq",
    "softirq",
    "steal",
    "guest",
    "guest_nice",
)
FIELD_COUNT: Final = len(FIELD_NAMES)

# Indices used by the usage-percentage formula.
IDLE: Final = FIELD_NAMES.index("idle")
IOWAIT: Final = FIELD_NAMES.index("iowait")

CounterVector = tuple[int, ...]
DeltaVector = tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Immutable record of one counter-source read.

    Attributes
    ----------
    timestamp : float
        Seconds since the epoch at which the read happened.
    aggregate : CounterVector
        The system-wide ``cpu`` line.
    cores : tuple[CounterVector, ...]
        One vector per ``cpuN`` line; the position is the core index.
    """

    timestamp: float
    aggregate: CounterVector
    cores: tuple[CounterVector, ...] = field(default_factory=tuple)

    @property
    def core_count(self) -> int:
        return len(self.cores)


FieldArray = Annotated[list[int], Field(min_length=FIELD_COUNT, max_length=FIELD_COUNT)]


class AggregateRecord(BaseModel):
    """One persisted tick: aggregate and per-core deltas (or their averages)."""

    cpu: FieldArray = Field(description="Aggregate delta, FIELD_NAMES order.")
    cores: list[FieldArray] = Field(
        default_factory=list, description="Per-core deltas, core index = position."
    )

    @classmethod
    def from_vectors(cls, cpu: DeltaVector, cores: tuple[DeltaVector, ...]) -> AggregateRecord:
        return cls(cpu=list(cpu), cores=[list(c) for c in cores])


#: A persisted record together with its literal log key (epoch seconds as str).
TimedRecord = tuple[str, AggregateRecord]


__all__ = [
    "FIELD_NAMES",
    "FIELD_COUNT",
    "IDLE",
    "IOWAIT",
    "CounterVector",
    "DeltaVector",
    "Snapshot",
    "AggregateRecord",
    "TimedRecord",
]
