"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo

from dateutil import tz
from dotenv import load_dotenv

load_dotenv()

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """
    Env vars:
    - PLANNER_TIMEZONE: zone for naive datetimes and composed due dates (default 'UTC')
    - PLANNER_SLOT_BUFFER_MINUTES: gap left after a conflicting task (default 5)
    - PLANNER_SLOT_MAX_ITERATIONS: bound on the slot search (default 100)
    - PLANNER_REMINDER_MINUTES: reminder window before a task is due (default 5)
    - PLANNER_UPCOMING_WINDOW_MINUTES: window for "upcoming" tasks (default 60)
    - PLANNER_LOG_LEVEL: root log level (default 'INFO')
    """

    timezone: str
    slot_buffer_minutes: int
    slot_max_iterations: int
    reminder_minutes: int
    upcoming_window_minutes: int
    log_level: str

    @property
    def tzinfo(self) -> tzinfo:
        return tz.gettz(self.timezone) or tz.UTC


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _parse_int(name: str, default: int) -> int:
    try:
        return int(_get_env(name, str(default)))
    except ValueError:
        return default


def _parse_non_negative(name: str, default: int) -> int:
    value = _parse_int(name, default)
    return value if value >= 0 else default


def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    zone = _get_env("PLANNER_TIMEZONE", "UTC")
    if tz.gettz(zone) is None:
        zone = "UTC"

    log_level = _get_env("PLANNER_LOG_LEVEL", "INFO").upper()
    if log_level not in _LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        timezone=zone,
        slot_buffer_minutes=_parse_non_negative("PLANNER_SLOT_BUFFER_MINUTES", 5),
        slot_max_iterations=_parse_non_negative("PLANNER_SLOT_MAX_ITERATIONS", 100),
        reminder_minutes=_parse_int("PLANNER_REMINDER_MINUTES", 5),
        upcoming_window_minutes=_parse_int("PLANNER_UPCOMING_WINDOW_MINUTES", 60),
        log_level=log_level,
    )
