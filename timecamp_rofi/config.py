"""
Timecamp Rofi — Centralized configuration.

Loads all settings from the data directory's .env and validates required keys.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

_DEFAULT_DATA_DIR = Path.home() / ".config" / "timecamp"


class ConfigurationError(Exception):
    """Raised when a required setting is missing or invalid."""


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Timecamp
    TIMECAMP_KEY: str
    TIMECAMP_API_URL: str = "https://www.timecamp.com/third_party/api"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Persisted state (tasks.json, entries.json, active.json, status.json)
    TIMECAMP_DATA_DIR: Path = _DEFAULT_DATA_DIR

    # Poll intervals, in minutes
    TIMEOUT_TASKS: int = 10
    TIMEOUT_ENTRIES: int = 5

    # Desktop integration
    PICKER_COMMAND: str = "rofi -dmenu -i -p Task"
    NOTIFY_ICON: str = ""

    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEOUT_TASKS", "TIMEOUT_ENTRIES", mode="before")
    @classmethod
    def parse_interval(cls, v: str | int) -> int:
        minutes = int(v)
        if minutes <= 0:
            raise ValueError("poll interval must be a positive number of minutes")
        return minutes

    @field_validator("TIMECAMP_DATA_DIR", mode="before")
    @classmethod
    def expand_data_dir(cls, v: str | Path) -> Path:
        return Path(v).expanduser()

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown LOG_LEVEL {v!r}")
        return level


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    data_dir = Path(os.getenv("TIMECAMP_DATA_DIR", str(_DEFAULT_DATA_DIR))).expanduser()
    load_dotenv(data_dir / ".env")

    api_key = os.getenv("TIMECAMP_KEY", "")
    if not api_key or api_key.startswith("your-"):
        raise ConfigurationError(f"TIMECAMP_KEY is missing; set it in {data_dir / '.env'}")

    try:
        return Settings(
            TIMECAMP_KEY=api_key,
            TIMECAMP_API_URL=os.getenv(
                "TIMECAMP_API_URL", "https://www.timecamp.com/third_party/api"
            ),
            HTTP_TIMEOUT_SECONDS=os.getenv("HTTP_TIMEOUT_SECONDS", "10"),
            TIMECAMP_DATA_DIR=data_dir,
            TIMEOUT_TASKS=os.getenv("TIMEOUT_TASKS", "10"),
            TIMEOUT_ENTRIES=os.getenv("TIMEOUT_ENTRIES", "5"),
            PICKER_COMMAND=os.getenv("PICKER_COMMAND", "rofi -dmenu -i -p Task"),
            NOTIFY_ICON=os.getenv("NOTIFY_ICON", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError subclass
        raise ConfigurationError(str(exc)) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use.

    Every other module reads configuration through this function:
        from timecamp_rofi.config import get_settings
    """
    return _load_settings()
