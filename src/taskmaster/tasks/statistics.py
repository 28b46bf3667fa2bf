# src/taskmaster/tasks/statistics.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..core.clock import Clock, day_window, week_window
from ..core.ports import CompletionRepo
from .overdue import is_overdue
from .task_models import CompletionRecord, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    overdue: int = 0
    completed_percentage: int = 0
    completions_today: int = 0
    completions_this_week: int = 0
    best_longest_streak: int = 0

    @property
    def active(self) -> int:
        return self.total - self.completed

    def summary(self) -> str:
        parts = [f"Tasks: {self.completed}/{self.total} ({self.completed_percentage}%)"]
        if self.overdue > 0:
            parts.append(f"Overdue: {self.overdue}")
        parts.append(f"Today: {self.completions_today}")
        parts.append(f"Week: {self.completions_this_week}")
        if self.best_longest_streak > 0:
            parts.append(f"Best streak: {self.best_longest_streak} days")
        return " | ".join(parts)


@dataclass(frozen=True, slots=True)
class HistorySummary:
    count: int = 0
    average_time: float = 0.0
    average_difficulty: float = 0.0
    total_time: int = 0


def completion_percentage(completed: int, total: int) -> int:
    if total == 0:
        return 0
    return (completed * 100) // total


class StatisticsAggregator:
    """
    Read-only summary over a task collection and the completion history.

    The only I/O is the two history range counts (today, this week).
    """

    def __init__(self, clock: Clock, *, first_weekday: int = 0) -> None:
        self._clock = clock
        self.first_weekday = first_weekday

    def aggregate(self, tasks: Iterable[Task], history: CompletionRepo) -> TaskStats:
        now_ms = self._clock.now_ms()

        total = 0
        completed = 0
        overdue = 0
        best = 0
        for task in tasks:
            total += 1
            if task.completed:
                completed += 1
            elif is_overdue(task, now_ms):
                overdue += 1
            best = max(best, task.longest_streak)

        day_start, day_end = day_window(now_ms, self._clock.tz)
        week_start, week_end = week_window(now_ms, self._clock.tz, self.first_weekday)

        today = history.count_completions(None, start=day_start, end=day_end)
        this_week = history.count_completions(None, start=week_start, end=week_end)

        stats = TaskStats(
            total=total,
            completed=completed,
            overdue=overdue,
            completed_percentage=completion_percentage(completed, total),
            completions_today=today,
            completions_this_week=this_week,
            best_longest_streak=best,
        )
        logger.debug("Stats computed: %s", stats)
        return stats


def summarize_history(records: Sequence[CompletionRecord]) -> HistorySummary:
    """
    True means over one task's completion records.

    Zero values mean "not tracked" and are left out of the averages.
    """
    times = [r.time_spent_minutes for r in records if r.time_spent_minutes > 0]
    difficulties = [r.difficulty for r in records if r.difficulty > 0]
    return HistorySummary(
        count=len(records),
        average_time=sum(times) / len(times) if times else 0.0,
        average_difficulty=sum(difficulties) / len(difficulties) if difficulties else 0.0,
        total_time=sum(r.time_spent_minutes for r in records),
    )
