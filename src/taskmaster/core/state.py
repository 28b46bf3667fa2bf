# src/taskmaster/core/state.py

"""
Composition root.

Builds the explicitly wired application state: one store, one clock, one
recorder, one aggregator, one lock registry. Nothing here is a process-wide
singleton; tests and callers build as many AppState objects as they need.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..config import get_settings
from ..tasks.completion import CompletionRecorder, StreakPolicy
from ..tasks.statistics import StatisticsAggregator
from ..tasks.task_locks import TaskLocks
from ..tasks.task_store import InMemoryTaskStore
from .clock import Clock, SystemClock
from .ports import TaskStoreLike

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: object
    clock: Clock
    task_store: TaskStoreLike
    recorder: CompletionRecorder
    aggregator: StatisticsAggregator
    locks: TaskLocks = field(default_factory=TaskLocks)


def create_initial_state(
    *,
    settings=None,
    clock: Clock | None = None,
    task_store: TaskStoreLike | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/clock/store injectable makes the core easy to test and
    avoids hidden global reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if clock is None:
        clock = SystemClock()
    if task_store is None:
        task_store = InMemoryTaskStore()

    recorder = CompletionRecorder(
        task_store,
        clock,
        streak_policy=StreakPolicy.from_config(getattr(settings, "streak_policy", None)),
        difficulty_min=int(getattr(settings, "difficulty_min", 0)),
        difficulty_max=int(getattr(settings, "difficulty_max", 10)),
        default_difficulty=int(getattr(settings, "default_difficulty", 5)),
    )
    aggregator = StatisticsAggregator(clock, first_weekday=int(getattr(settings, "first_weekday", 0)))

    logger.info("State ready streak_policy=%s", recorder.streak_policy.value)
    return AppState(
        settings=settings,
        clock=clock,
        task_store=task_store,
        recorder=recorder,
        aggregator=aggregator,
    )
