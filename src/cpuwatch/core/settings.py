"""Centralized monitor configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The sampling cadence is deliberately *not* configurable; see
:data:`SAMPLE_INTERVAL_S`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

#: Fixed tick length of the live loop, in seconds.
SAMPLE_INTERVAL_S = 1.0

#: Averaging window used when ``--times`` is absent or unusable.
DEFAULT_AVG_TIMES = 10


class Settings(BaseSettings):
    """Typed monitor configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `CPUWATCH_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    stat_path : Path
        Counter source to sample; maps from `CPUWATCH_STAT_PATH`.
    log_file : Path
        Persistence log location; maps from `CPUWATCH_LOG_FILE`.
    avg_times : int
        Default averaging window for `--avg`; maps from `CPUWATCH_AVG_TIMES`.
    """

    environment: EnvName = Field(default="dev", alias="CPUWATCH_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    stat_path: Path = Field(default=Path("/proc/stat"), alias="CPUWATCH_STAT_PATH")
    log_file: Path = Field(default=Path("cpu_averages.json"), alias="CPUWATCH_LOG_FILE")
    avg_times: int = Field(default=DEFAULT_AVG_TIMES, ge=1, alias="CPUWATCH_AVG_TIMES")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("CPUWATCH_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "cpuwatch") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`.

    The level is re-read through :func:`load_settings` on every call so a
    cache clear (tests, ``--verbose``) is honoured by loggers created later.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


def set_log_level(level: LogLevelName) -> None:
    """Re-level every ``cpuwatch`` logger created so far (e.g. for ``--verbose``)."""
    numeric = getattr(logging, level, logging.INFO)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.split(".", 1)[0] == "cpuwatch" and isinstance(logger, logging.Logger):
            logger.setLevel(numeric)
