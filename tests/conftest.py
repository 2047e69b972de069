"""Shared fixtures: synthetic snapshots and an isolated persistence log."""

from __future__ import annotations

import io
from collections.abc import Sequence
from pathlib import Path

import pytest
from rich.console import Console

from cpuwatch.core.contracts.counters import Snapshot
from cpuwatch.core.storage import AverageLog


def make_snapshot(
    timestamp: float,
    cpu: Sequence[int],
    cores: Sequence[Sequence[int]] = (),
) -> Snapshot:
    """Build a snapshot from plain lists (test helper, not a fixture)."""
    return Snapshot(
        timestamp=timestamp,
        aggregate=tuple(cpu),
        cores=tuple(tuple(c) for c in cores),
    )


@pytest.fixture  # type: ignore[misc]
def log(tmp_path: Path) -> AverageLog:
    """A persistence log inside the test's temp directory."""
    return AverageLog(tmp_path / "cpu_averages.json")


@pytest.fixture  # type: ignore[misc]
def console() -> Console:
    """A wide, non-terminal console that records everything it prints."""
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_text(console: Console) -> str:
    """Return what has been printed to a `console` fixture so far."""
    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()
