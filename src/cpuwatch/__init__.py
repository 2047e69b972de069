"""cpuwatch: a terminal CPU-utilization monitor built on ``/proc/stat``.

The package samples the kernel's cumulative jiffy counters once per second,
differences consecutive samples and renders the result as fixed-width tables.
Computed records can be persisted to a JSON log and replayed later.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
