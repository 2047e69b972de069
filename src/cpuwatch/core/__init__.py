"""Core package initializer for cpuwatch.

The sampling engine lives here; downstream code imports from the submodules:
    from cpuwatch.core.settings import settings, load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
