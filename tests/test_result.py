"""Unit tests for the Result container used by every fallible operation."""

from __future__ import annotations

import pytest

from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Err, Result, err, ok


def test_ok_map_and_flat_map() -> None:
    """`Ok` should map/flat_map and keep values typed."""
    r: Result[int, str] = ok(10)
    r2 = r.map(lambda x: x + 5).flat_map(lambda x: ok(x * 2))
    assert r2.is_ok() and r2.unwrap() == 30


def test_err_propagation_and_map_err() -> None:
    """`Err` should propagate through map/flat_map and allow mapping the error."""
    r: Result[int, MonitorError] = err(MonitorError(ErrorKind.PARSE, "bad counter"))
    assert r.is_err()
    assert r.map(lambda x: x + 1).is_err()
    assert r.flat_map(lambda x: ok(x)).unwrap_err().kind is ErrorKind.PARSE
    r2 = r.map_err(str)
    assert isinstance(r2, Err) and r2.unwrap_err() == "parse: bad counter"


def test_unwrap_variants_and_defaults() -> None:
    """Unwrap behavior: default value and explicit error raising."""
    assert ok("x").unwrap() == "x"
    assert err("e").unwrap(default="fallback") == "fallback"
    with pytest.raises(RuntimeError):
        err("e").unwrap()
    with pytest.raises(RuntimeError):
        ok(1).unwrap_err()


def test_error_kinds_fatality() -> None:
    """Only I/O, parse and shape errors stop the monitor."""
    fatal = {kind for kind in ErrorKind if MonitorError(kind, "").is_fatal}
    assert fatal == {ErrorKind.IO, ErrorKind.PARSE, ErrorKind.SHAPE_MISMATCH}
