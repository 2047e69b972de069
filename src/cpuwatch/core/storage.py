"""Disk-backed, append-only log of computed CPU records.

This module persists one :class:`AggregateRecord` per monitor tick.

- Default path:  `CPUWATCH_LOG_FILE` env var or `cpu_averages.json`
- Content:       a single JSON array of one-key objects,
                 `[{"1700000000": {"cpu": [...10 ints], "cores": [[...], ...]}}, ...]`
- Keys:          epoch seconds of the computation, stored as strings

Durability
----------
Appends never edit the file in place. The whole array is rewritten to a
temporary file in the same directory, flushed, and moved over the log with
`os.replace`, so an interrupted append leaves the previous log intact.

Usage
-----
>>> log = AverageLog(Path("cpu_averages.json"))
>>> log.append("1700000000", record)
>>> log.read_one("1700000000").unwrap()
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cpuwatch.core.contracts.counters import AggregateRecord, TimedRecord
from cpuwatch.core.errors import ErrorKind, MonitorError
from cpuwatch.core.result import Result, err, ok
from cpuwatch.core.settings import get_logger, load_settings

logger = get_logger(__name__)


def _default_path() -> Path:
    """Return the configured log location."""
    return load_settings().log_file


def _match_mode(tmp_name: str, target: Path) -> None:
    """Give the replacement file the log's existing mode, or the umask default."""
    if target.exists():
        shutil.copymode(target, tmp_name)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp_name, 0o666 & ~umask)


class AverageLog:
    """Append-only JSON array of timestamp-keyed records."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else _default_path()

    # ------------------------------- Reading --------------------------------

    def _load_raw(self) -> Result[list[Any], MonitorError]:
        """Load the raw JSON array; a missing or empty file is an empty log."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ok([])
        except OSError as exc:
            return err(MonitorError(ErrorKind.IO, f"cannot read {self.path}: {exc}"))

        if not text.strip():
            return ok([])
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            return err(MonitorError(ErrorKind.PARSE, f"{self.path} is not valid JSON: {exc}"))
        if not isinstance(data, list):
            return err(MonitorError(ErrorKind.PARSE, f"{self.path} does not hold a JSON array"))
        return ok(data)

    def read_all(self) -> Result[list[TimedRecord], MonitorError]:
        """
        Return every record in file order.

        Returns
        -------
        Result[list[TimedRecord], MonitorError]
            ``Err(PARSE)`` if an element is not a ``{key: record}`` object
            or a record does not have the expected shape.
        """
        raw = self._load_raw()
        if raw.is_err():
            return err(raw.unwrap_err())

        records: list[TimedRecord] = []
        for index, entry in enumerate(raw.unwrap()):
            if not isinstance(entry, dict):
                return err(
                    MonitorError(ErrorKind.PARSE, f"entry {index} of {self.path} is not an object")
                )
            for key, payload in entry.items():
                try:
                    records.append((str(key), AggregateRecord.model_validate(payload)))
                except ValidationError as exc:
                    return err(
                        MonitorError(ErrorKind.PARSE, f"entry {index} ({key}) is malformed: {exc}")
                    )
        logger.debug("Loaded %d records from %s", len(records), self.path)
        return ok(records)

    def read_one(self, key: str) -> Result[TimedRecord, MonitorError]:
        """Return the first record whose key equals ``key`` (string equality)."""
        return self.read_all().flat_map(lambda records: self._find(records, key))

    def _find(self, records: list[TimedRecord], key: str) -> Result[TimedRecord, MonitorError]:
        for record_key, record in records:
            if record_key == key:
                return ok((record_key, record))
        return err(MonitorError(ErrorKind.NOT_FOUND, f"No data found for timestamp {key}."))

    # ------------------------------- Writing --------------------------------

    def append(self, key: str, record: AggregateRecord) -> Result[Path, MonitorError]:
        """
        Append ``{key: record}`` to the log and return its path.

        Existing content is validated before anything is written; a corrupt
        log is reported as ``Err(PARSE)`` and left untouched.
        """
        raw = self._load_raw()
        if raw.is_err():
            return err(raw.unwrap_err())

        entries = raw.unwrap()
        entries.append({key: record.model_dump()})
        lines = [json.dumps(entry, separators=(",", ":")) for entry in entries]
        payload = "[\n" + ",\n".join(lines) + "\n]\n"

        directory = self.path.parent if str(self.path.parent) else Path(".")
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            _match_mode(tmp_name, self.path)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return err(MonitorError(ErrorKind.IO, f"cannot write {self.path}: {exc}"))

        logger.debug("Appended record %s to %s (%d total)", key, self.path, len(entries))
        return ok(self.path)


__all__ = ["AverageLog"]
