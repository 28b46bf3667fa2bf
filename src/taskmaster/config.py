# src/taskmaster/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every knob has a safe default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKMASTER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Completion ----
    streak_policy: str  # "recurring_only" | "all_tasks"
    difficulty_min: int
    difficulty_max: int
    default_difficulty: int

    # ---- Statistics ----
    first_weekday: int  # 0 = Monday ... 6 = Sunday

    # ---- Sweeper ----
    sweep_interval_seconds: float
    sweep_frequency_periods: bool
    stamp_overdue: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskmaster").strip() or "taskmaster"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmaster"))

        streak_policy = _env(_k("STREAK_POLICY"), "recurring_only").strip().lower()

        difficulty_min = _env_int(_k("DIFFICULTY_MIN"), 0)
        difficulty_max = _env_int(_k("DIFFICULTY_MAX"), 10)
        if difficulty_max < difficulty_min:
            difficulty_min, difficulty_max = 0, 10
        default_difficulty = _env_int(_k("DEFAULT_DIFFICULTY"), 5)
        default_difficulty = max(difficulty_min, min(difficulty_max, default_difficulty))

        first_weekday = _env_int(_k("FIRST_WEEKDAY"), 0) % 7

        sweep_interval_seconds = max(1.0, _env_float(_k("SWEEP_INTERVAL_SECONDS"), 60.0))
        sweep_frequency_periods = _env_bool(_k("SWEEP_FREQUENCY_PERIODS"), False)
        stamp_overdue = _env_bool(_k("STAMP_OVERDUE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            streak_policy=streak_policy,
            difficulty_min=difficulty_min,
            difficulty_max=difficulty_max,
            default_difficulty=default_difficulty,
            first_weekday=first_weekday,
            sweep_interval_seconds=sweep_interval_seconds,
            sweep_frequency_periods=sweep_frequency_periods,
            stamp_overdue=stamp_overdue,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
