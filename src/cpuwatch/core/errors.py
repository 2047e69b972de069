"""Error taxonomy carried inside ``Err`` results.

Every fallible monitor operation reports one :class:`MonitorError`. The
:class:`ErrorKind` decides how the CLI reacts:

- ``IO`` / ``PARSE`` / ``SHAPE_MISMATCH``: fatal, exit code 1.
- ``NOT_FOUND``: user-visible notice, clean exit.
- ``INSUFFICIENT_DATA``: "not enough data" notice, the loop keeps going.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    IO = "io"
    PARSE = "parse"
    SHAPE_MISMATCH = "shape_mismatch"
    NOT_FOUND = "not_found"
    INSUFFICIENT_DATA = "insufficient_data"


FATAL_KINDS = frozenset({ErrorKind.IO, ErrorKind.PARSE, ErrorKind.SHAPE_MISMATCH})


@dataclass(frozen=True, slots=True)
class MonitorError:
    """A typed failure: what went wrong (``kind``) and a human message."""

    kind: ErrorKind
    message: str

    @property
    def is_fatal(self) -> bool:
        return self.kind in FATAL_KINDS

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


__all__ = ["ErrorKind", "FATAL_KINDS", "MonitorError"]
