# src/taskmaster/tasks/completion.py

"""
Completion recorder.

Orchestrates one completion event against a single instant:
0) refuse a frequency task that already met its goal in its open period,
1) append a completion record (only when tracking details are given),
2) update running completion stats on the task,
3) apply recurrence (recurrence.advance),
4) apply streaks (streaks.update), subject to StreakPolicy,
5) return the updated task. Saving it is the caller's job.

Neither complete() nor uncomplete() is idempotent: callers must invoke them
at most once per physical completion and serialize writes per task id.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import StrEnum

from ..core.clock import Clock
from ..core.errors import PersistenceError, ValidationError
from ..core.ports import CompletionRepo
from . import recurrence, streaks
from .task_models import CompletionDetails, CompletionRecord, Task, validate_details

logger = logging.getLogger(__name__)


class StreakPolicy(StrEnum):
    RECURRING_ONLY = "recurring_only"
    ALL_TASKS = "all_tasks"

    @classmethod
    def from_config(cls, raw: str | None) -> StreakPolicy:
        if not raw:
            return cls.RECURRING_ONLY
        try:
            return cls(raw.strip().lower())
        except ValueError:
            logger.warning("Unknown streak policy %r; using %s", raw, cls.RECURRING_ONLY.value)
            return cls.RECURRING_ONLY


def rolling_average(avg: float, new: float) -> float:
    """avg' = new if avg == 0 else (avg + new) / 2. Not a true mean."""
    if avg == 0:
        return float(new)
    return (avg + new) / 2


class CompletionRecorder:
    def __init__(
        self,
        completions: CompletionRepo,
        clock: Clock,
        *,
        streak_policy: StreakPolicy = StreakPolicy.RECURRING_ONLY,
        difficulty_min: int = 0,
        difficulty_max: int = 10,
        default_difficulty: int = 5,
    ) -> None:
        self._completions = completions
        self._clock = clock
        self.streak_policy = streak_policy
        self.difficulty_min = difficulty_min
        self.difficulty_max = difficulty_max
        self.default_difficulty = default_difficulty

    def resolve_details(self, details: CompletionDetails) -> CompletionDetails:
        """Fill an unrated difficulty with the configured default."""
        if details.difficulty is None:
            return replace(details, difficulty=self.default_difficulty)
        return details

    def streak_applies(self, task: Task) -> bool:
        if self.streak_policy == StreakPolicy.ALL_TASKS:
            return True
        return task.is_recurring

    def complete(self, task: Task, details: CompletionDetails | None = None) -> Task:
        now_ms = self._clock.now_ms()

        if recurrence.goal_met_in_period(task, now_ms):
            raise ValidationError(f"task {task.id} already met its goal for this period")

        if details is not None:
            details = self.resolve_details(details)
            validate_details(details, low=self.difficulty_min, high=self.difficulty_max)
            self._append_record(task, details, now_ms)

        updated = replace(task, completion_count=task.completion_count + 1)
        if details is not None:
            updated = replace(
                updated,
                average_completion_time=rolling_average(
                    updated.average_completion_time, details.time_spent_minutes
                ),
                average_difficulty=rolling_average(updated.average_difficulty, details.difficulty),
            )

        outcome = recurrence.advance(updated, now_ms)
        updated = outcome.task

        if self.streak_applies(updated):
            updated = streaks.update(updated, now_ms).apply(updated)

        if updated.completed:
            updated = replace(updated, completed_at=now_ms, overdue_since=None)

        logger.info(
            "Task %s completed at=%s state=%s streak=%s/%s tracked=%s",
            task.id,
            now_ms,
            outcome.state.value,
            updated.current_streak,
            updated.longest_streak,
            details is not None,
        )
        return updated

    def quick_complete(self, task: Task) -> Task:
        return self.complete(task, None)

    def uncomplete(self, task: Task) -> Task:
        # Streak and period state are left as they are.
        logger.info("Task %s marked as active", task.id)
        return replace(task, completed=False, completed_at=None)

    def _append_record(self, task: Task, details: CompletionDetails, now_ms: int) -> None:
        record = CompletionRecord(
            completion_id=0,
            task_id=task.id,
            completed_at=now_ms,
            time_spent_minutes=details.time_spent_minutes,
            difficulty=details.difficulty,
            notes=details.notes,
        )
        try:
            completion_id = self._completions.append_completion(record)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"failed to record completion for task {task.id}") from exc
        logger.debug("Completion %s recorded for task %s", completion_id, task.id)
