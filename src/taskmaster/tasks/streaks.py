# src/taskmaster/tasks/streaks.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import tzinfo

from ..core.clock import DAY_MS, start_of_day
from .task_models import Task


@dataclass(frozen=True, slots=True)
class StreakUpdate:
    current_streak: int
    longest_streak: int
    last_streak_date: int | None

    def apply(self, task: Task) -> Task:
        return replace(
            task,
            current_streak=self.current_streak,
            longest_streak=self.longest_streak,
            last_streak_date=self.last_streak_date,
        )


def update(task: Task, completion_ms: int) -> StreakUpdate:
    """
    Streak counters after a completion at completion_ms.

    Days are counted as whole elapsed 24h blocks since last_streak_date:
    - first completion       -> streak 1
    - same block (0 days)    -> unchanged, last_streak_date kept
    - next block (1 day)     -> streak + 1
    - later (2+ days)        -> streak broken, back to 1
    """
    longest = task.longest_streak

    if task.last_streak_date is None:
        return StreakUpdate(1, max(longest, 1), completion_ms)

    days = (completion_ms - task.last_streak_date) // DAY_MS

    # Out-of-order instants count as "already credited".
    if days <= 0:
        return StreakUpdate(task.current_streak, longest, task.last_streak_date)

    if days == 1:
        current = task.current_streak + 1
        return StreakUpdate(current, max(longest, current), completion_ms)

    return StreakUpdate(1, max(longest, 1), completion_ms)


def streak_from_history(completions_ms: Iterable[int], tz: tzinfo | None = None) -> tuple[int, int]:
    """
    Recompute (current, longest) from raw completion instants.

    Works on calendar days in tz; several completions on one day count once.
    "current" is the run ending at the most recent completion day.
    """
    days = sorted({start_of_day(ts, tz) for ts in completions_ms}, reverse=True)
    if not days:
        return 0, 0

    current = 0
    longest = 0
    run = 0
    prev: int | None = None
    in_leading_run = True

    for day in days:
        # Calendar days can be 23h/25h around DST; round to whole days.
        if prev is not None and round((prev - day) / DAY_MS) == 1:
            run += 1
        else:
            if prev is not None:
                in_leading_run = False
            longest = max(longest, run)
            run = 1
        if in_leading_run:
            current = run
        prev = day

    longest = max(longest, run)
    return current, longest
