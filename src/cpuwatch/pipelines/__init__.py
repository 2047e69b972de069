"""Pipeline entry points for cpuwatch.

Currently exposed:

- :func:`run_live` - the 1 second sampling loop (instant or average mode).
- :func:`run_read` - one-shot replay of the persistence log.
"""

from __future__ import annotations

from .monitor import LiveConfig, run_live, run_read, run_tick

__all__ = ["LiveConfig", "run_live", "run_read", "run_tick"]
