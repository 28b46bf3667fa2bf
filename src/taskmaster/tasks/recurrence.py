# src/taskmaster/tasks/recurrence.py

"""
Recurrence engine.

Decides a task's next due state after a completion:

- NONE:      completed, terminal until the user un-completes it.
- INTERVAL:  completed now; due_date moves to completion + amount * unit.
             A periodic sweep flips it back to active once due_date passes.
- FREQUENCY: counts completions inside a rolling period that starts at the
             first completion. The task is completed only when the goal is met;
             a completion after the period has lapsed starts a new period.

Unit lengths are fixed: a month is 30 days, not a calendar month.

Everything here is pure: functions take a task snapshot and return a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from ..core.clock import DAY_MS
from .task_models import Recurrence, RecurrenceType, Task, TimeUnit

_UNIT_MS: dict[TimeUnit, int] = {
    TimeUnit.DAY: DAY_MS,
    TimeUnit.WEEK: 7 * DAY_MS,
    TimeUnit.MONTH: 30 * DAY_MS,
}


class RecurrenceState(StrEnum):
    DONE = "done"  # non-recurring, completed
    WAITING = "waiting"  # interval task completed, waiting for its next due date
    IN_PROGRESS = "in_progress"  # frequency goal not met yet, still actionable
    GOAL_MET = "goal_met"  # frequency goal met for the current period


@dataclass(frozen=True, slots=True)
class RecurrenceOutcome:
    task: Task
    state: RecurrenceState


def unit_length_ms(unit: TimeUnit) -> int:
    return _UNIT_MS[unit]


def next_due_date(from_ms: int, recurrence: Recurrence) -> int:
    return from_ms + recurrence.amount * unit_length_ms(recurrence.unit)


def period_end(task: Task) -> int | None:
    if task.current_period_start is None:
        return None
    return task.current_period_start + unit_length_ms(task.recurrence.unit)


def advance(task: Task, completion_ms: int) -> RecurrenceOutcome:
    """Apply one completion event at completion_ms to a task snapshot."""
    kind = task.recurrence.kind

    if kind == RecurrenceType.INTERVAL:
        updated = replace(
            task,
            completed=True,
            last_completed_date=completion_ms,
            due_date=next_due_date(completion_ms, task.recurrence),
        )
        return RecurrenceOutcome(updated, RecurrenceState.WAITING)

    if kind == RecurrenceType.FREQUENCY:
        return _advance_frequency(task, completion_ms)

    updated = replace(task, completed=True, last_completed_date=completion_ms)
    return RecurrenceOutcome(updated, RecurrenceState.DONE)


def _advance_frequency(task: Task, completion_ms: int) -> RecurrenceOutcome:
    end = period_end(task)

    if end is None or completion_ms > end:
        # No open period, or it lapsed: the previous count is not carried over.
        period_start = completion_ms
        count = 1
    else:
        period_start = task.current_period_start
        count = min(task.completions_this_period + 1, task.recurrence.amount)

    goal_met = count >= task.recurrence.amount
    updated = replace(
        task,
        completed=goal_met,
        completions_this_period=count,
        current_period_start=period_start,
        last_completed_date=completion_ms,
    )
    state = RecurrenceState.GOAL_MET if goal_met else RecurrenceState.IN_PROGRESS
    return RecurrenceOutcome(updated, state)


# ---- sweep helpers ----


def should_reset_interval(task: Task, now_ms: int) -> bool:
    return (
        task.recurrence.kind == RecurrenceType.INTERVAL
        and task.completed
        and bool(task.due_date)
        and task.due_date <= now_ms
    )


def reset_interval(task: Task) -> Task:
    """Reactivate a completed interval task and push its due date one more interval."""
    return replace(
        task,
        completed=False,
        completed_at=None,
        due_date=next_due_date(task.due_date, task.recurrence),
    )


def goal_met_in_period(task: Task, now_ms: int) -> bool:
    """A frequency task that already met its goal and whose period is still open."""
    if task.recurrence.kind != RecurrenceType.FREQUENCY or not task.completed:
        return False
    end = period_end(task)
    return (
        end is not None
        and now_ms <= end
        and task.completions_this_period >= task.recurrence.amount
    )


def period_lapsed(task: Task, now_ms: int) -> bool:
    if task.recurrence.kind != RecurrenceType.FREQUENCY:
        return False
    end = period_end(task)
    return end is not None and now_ms > end


def reset_frequency(task: Task) -> Task:
    """Close a lapsed period so the next completion starts a fresh one."""
    return replace(
        task,
        completed=False,
        completed_at=None,
        completions_this_period=0,
        current_period_start=None,
    )
