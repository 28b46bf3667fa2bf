# tests/conftest.py

from __future__ import annotations

from datetime import timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.core.state import AppState, create_initial_state
from taskmaster.tasks.task_store import InMemoryTaskStore

from .fakes import T0, FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_initial_state.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskmaster-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        streak_policy="recurring_only",
        difficulty_min=0,
        difficulty_max=10,
        default_difficulty=5,
        first_weekday=0,
        sweep_interval_seconds=0.01,
        sweep_frequency_periods=False,
        stamp_overdue=True,
    )


@pytest.fixture()
def clock() -> FakeClock:
    """Deterministic UTC clock starting Monday 2024-01-01 09:00."""
    return FakeClock(T0, tz=timezone.utc)


@pytest.fixture()
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock, store: InMemoryTaskStore) -> AppState:
    return create_initial_state(settings=settings, clock=clock, task_store=store)
