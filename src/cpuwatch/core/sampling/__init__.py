"""Sampling engine: counter-source reader, delta engine and history window."""

from __future__ import annotations

from .delta import SnapshotDelta, delta, snapshot_delta
from .reader import parse_stat, read_snapshot
from .window import HistoryWindow

__all__ = [
    "HistoryWindow",
    "SnapshotDelta",
    "delta",
    "parse_stat",
    "read_snapshot",
    "snapshot_delta",
]
