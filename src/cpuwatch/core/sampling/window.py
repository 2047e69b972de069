"""
Bounded, chronologically ordered history of snapshots.

The window is owned by the driver loop and passed explicitly to the
aggregator, so it can be filled with synthetic snapshots in tests.

Capacity
--------
- Instant mode keeps the last 2 snapshots (one pair).
- Average mode keeps ``times + 1`` snapshots, since ``times`` pairs need
  ``times + 1`` samples.

Appending past capacity evicts from the front (FIFO).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from cpuwatch.core.contracts.counters import Snapshot

SnapshotPair = tuple[Snapshot, Snapshot]


class HistoryWindow:
    """
    FIFO buffer of :class:`Snapshot` objects with a hard capacity.

    Attributes
    ----------
    capacity : int
        Maximum number of snapshots retained (at least 2).
    """

    __slots__ = ("capacity", "_items")

    def __init__(self, capacity: int = 2) -> None:
        if capacity < 2:
            raise ValueError(f"window capacity must be >= 2, got {capacity}")
        self.capacity: int = capacity
        self._items: deque[Snapshot] = deque()

    @classmethod
    def for_mode(cls, average: bool, times: int) -> HistoryWindow:
        """Size a window for instant (2) or average (``times + 1``) mode."""
        return cls(times + 1 if average else 2)

    # ------------------------------- Mutation -------------------------------

    def append(self, snapshot: Snapshot) -> None:
        """Add ``snapshot`` at the end, evicting the oldest entries if over capacity."""
        self._items.append(snapshot)
        while len(self._items) > self.capacity:
            self._items.popleft()

    # ------------------------------- Queries --------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def has_enough_data(self) -> bool:
        """At least one (previous, current) pair is available."""
        return len(self._items) >= 2

    def snapshots(self) -> tuple[Snapshot, ...]:
        """Return the current contents, oldest first (immutable tuple)."""
        return tuple(self._items)

    def consecutive_pairs(self) -> Iterator[SnapshotPair]:
        """
        Yield ``(previous, current)`` adjacent pairs in chronological order.

        Iteration runs over a frozen copy, so appends made while a caller is
        still consuming the generator do not affect it.
        """
        items = self.snapshots()
        for i in range(1, len(items)):
            yield items[i - 1], items[i]

    def latest_pairs(self, count: int) -> list[SnapshotPair]:
        """Return the newest ``count`` pairs (fewer if the window is short)."""
        pairs = list(self.consecutive_pairs())
        if count <= 0:
            return []
        return pairs[-count:]


__all__ = ["HistoryWindow", "SnapshotPair"]
