"""Unit tests for the append-only JSON persistence log."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from typing import Any

from cpuwatch.core.contracts.counters import AggregateRecord
from cpuwatch.core.errors import ErrorKind
from cpuwatch.core.storage import AverageLog


def _record(seed: int, cores: int = 2) -> AggregateRecord:
    return AggregateRecord(
        cpu=[seed + i for i in range(10)],
        cores=[[seed * 10 + c] * 10 for c in range(cores)],
    )


def test_first_append_creates_one_element_array(log: AverageLog) -> None:
    """Appending to a missing log yields a JSON array of length 1."""
    assert log.append("1700000000", _record(1)).unwrap() == log.path

    payload = json.loads(log.path.read_text(encoding="utf-8"))
    assert isinstance(payload, list) and len(payload) == 1
    assert payload[0] == {"1700000000": {"cpu": list(range(1, 11)), "cores": [[10] * 10, [11] * 10]}}


def test_second_append_keeps_first_record(log: AverageLog) -> None:
    log.append("1700000000", _record(1))
    log.append("1700000001", _record(2))

    payload = json.loads(log.path.read_text(encoding="utf-8"))
    assert [next(iter(entry)) for entry in payload] == ["1700000000", "1700000001"]
    assert payload[0]["1700000000"]["cpu"][0] == 1


def test_append_to_empty_file(log: AverageLog) -> None:
    """A zero-byte file is treated as an empty log."""
    log.path.write_text("", encoding="utf-8")
    log.append("1", _record(0))
    assert len(json.loads(log.path.read_text(encoding="utf-8"))) == 1


def test_read_all_in_append_order(log: AverageLog) -> None:
    keys = [str(1700000000 + i) for i in range(4)]
    for i, key in enumerate(keys):
        log.append(key, _record(i))

    records = log.read_all().unwrap()

    assert [key for key, _ in records] == keys
    assert records[2][1] == _record(2)


def test_read_all_missing_file_is_empty(tmp_path: Path) -> None:
    assert AverageLog(tmp_path / "absent.json").read_all().unwrap() == []


def test_read_one_exact_key(log: AverageLog) -> None:
    log.append("1700000000", _record(1))
    log.append("1700000005", _record(5))

    key, record = log.read_one("1700000005").unwrap()

    assert key == "1700000005"
    assert record == _record(5)


def test_read_one_is_string_match(log: AverageLog) -> None:
    """Keys are matched literally, so a numerically equal key is not found."""
    log.append("1700000000", _record(1))
    result = log.read_one("01700000000")
    assert result.is_err()
    assert result.unwrap_err().kind is ErrorKind.NOT_FOUND


def test_read_one_missing_key(log: AverageLog) -> None:
    log.append("1700000000", _record(1))
    error = log.read_one("1699999999").unwrap_err()
    assert error.kind is ErrorKind.NOT_FOUND
    assert error.message == "No data found for timestamp 1699999999."


def test_corrupt_log_is_parse_error_and_not_overwritten(log: AverageLog) -> None:
    """An interrupted legacy append must not be silently replaced."""
    log.path.write_text('[{"1": {"cpu": [1,2', encoding="utf-8")

    assert log.read_all().unwrap_err().kind is ErrorKind.PARSE
    assert log.append("2", _record(2)).unwrap_err().kind is ErrorKind.PARSE
    assert log.path.read_text(encoding="utf-8") == '[{"1": {"cpu": [1,2'


def test_non_array_document_is_parse_error(log: AverageLog) -> None:
    log.path.write_text('{"1": {}}', encoding="utf-8")
    assert log.read_all().unwrap_err().kind is ErrorKind.PARSE


def test_wrong_field_count_is_parse_error(log: AverageLog) -> None:
    log.path.write_text('[{"1": {"cpu": [1, 2, 3], "cores": []}}]', encoding="utf-8")
    assert log.read_all().unwrap_err().kind is ErrorKind.PARSE


def test_append_leaves_no_temp_files(log: AverageLog) -> None:
    log.append("1", _record(1))
    log.append("2", _record(2))
    assert sorted(p.name for p in log.path.parent.iterdir()) == [log.path.name]


def test_append_keeps_existing_file_mode(log: AverageLog) -> None:
    log.append("1", _record(1))
    log.path.chmod(0o640)
    log.append("2", _record(2))
    assert stat.S_IMODE(log.path.stat().st_mode) == 0o640


def test_new_log_gets_umask_default_mode(log: AverageLog) -> None:
    umask = os.umask(0o022)
    try:
        log.append("1", _record(1))
    finally:
        os.umask(umask)
    assert stat.S_IMODE(log.path.stat().st_mode) == 0o644


def test_default_path_from_settings(monkeypatch: Any, tmp_path: Path) -> None:
    """Without an explicit path the log uses CPUWATCH_LOG_FILE."""
    from cpuwatch.core.settings import load_settings

    target = tmp_path / "from_env.json"
    monkeypatch.setenv("CPUWATCH_LOG_FILE", str(target))
    load_settings.cache_clear()
    try:
        assert AverageLog().path == target
    finally:
        monkeypatch.delenv("CPUWATCH_LOG_FILE")
        load_settings.cache_clear()
