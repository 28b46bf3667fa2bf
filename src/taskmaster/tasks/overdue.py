# src/taskmaster/tasks/overdue.py

from __future__ import annotations

from dataclasses import replace
from datetime import tzinfo

from ..core.clock import DAY_MS, HOUR_MS, MINUTE_MS, start_of_day
from .task_models import RecurrenceType, Task


def is_overdue(task: Task, now_ms: int) -> bool:
    return bool(task.due_date) and not task.completed and task.due_date < now_ms


def overdue_duration(task: Task, now_ms: int) -> int:
    """Milliseconds past the due date; 0 when the task is not overdue."""
    if not is_overdue(task, now_ms):
        return 0
    return now_ms - task.due_date


def is_due_today(task: Task, now_ms: int, tz: tzinfo | None = None) -> bool:
    if not task.due_date:
        return False
    start = start_of_day(now_ms, tz)
    return start <= task.due_date < start + DAY_MS


def stamp_overdue(task: Task, now_ms: int) -> Task | None:
    """
    Record the first time a task is seen overdue.

    Returns the stamped copy, or None when there is nothing to persist
    (not overdue, or already stamped).
    """
    if task.overdue_since is not None or not is_overdue(task, now_ms):
        return None
    return replace(task, overdue_since=now_ms)


def next_appearance(task: Task, now_ms: int) -> int | None:
    """
    Milliseconds until a completed interval task becomes active again.

    None when not applicable; 0 when it is due now.
    """
    if task.recurrence.kind != RecurrenceType.INTERVAL or not task.completed or not task.due_date:
        return None
    return max(0, task.due_date - now_ms)


def format_duration(ms: int) -> str:
    """Coarse human duration: days, else hours, else minutes."""
    ms = max(0, int(ms))
    days = ms // DAY_MS
    if days > 0:
        return f"{days} day{'s' if days > 1 else ''}"
    hours = ms // HOUR_MS
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    minutes = ms // MINUTE_MS
    return f"{minutes} minute{'s' if minutes != 1 else ''}"
