"""
Engine Configuration

Settings are read from the environment once and cached:
- SALELINE_DIVISION_PRECISION: fractional digits kept by every division (default 16)
- LOG_LEVEL: DEBUG, INFO, WARNING (or WARN), ERROR, CRITICAL (default INFO,
  unknown names fall back to INFO)

Call get_settings.cache_clear() after changing the environment to reload.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DIVISION_PRECISION = 16

PRECISION_ENV_VAR = "SALELINE_DIVISION_PRECISION"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class EngineSettings(BaseModel):
    """Immutable engine settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    division_precision: int = Field(default=DEFAULT_DIVISION_PRECISION, ge=0, le=1000)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Upper-case the level; unknown names fall back to INFO like getattr(logging, ...)."""
        if not isinstance(value, str):
            return "INFO"

        level = value.strip().upper()
        level = LOG_LEVEL_ALIASES.get(level, level)
        return level if level in LOG_LEVELS else "INFO"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """
        Build settings from environment variables.

        Raises:
            pydantic.ValidationError: If the division precision is invalid
        """
        values = {}

        precision = os.getenv(PRECISION_ENV_VAR)
        if precision is not None and precision.strip():
            values["division_precision"] = precision.strip()

        level = os.getenv(LOG_LEVEL_ENV_VAR)
        if level is not None and level.strip():
            values["log_level"] = level

        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return the process-wide settings loaded from the environment."""
    return EngineSettings.from_env()


__all__ = [
    "DEFAULT_DIVISION_PRECISION",
    "PRECISION_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "LOG_LEVELS",
    "EngineSettings",
    "get_settings",
]
