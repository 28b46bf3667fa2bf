# src/taskmaster/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

from ..core.errors import ValidationError


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    URGENT = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class RecurrenceType(StrEnum):
    NONE = "none"
    INTERVAL = "interval"  # "every X units"
    FREQUENCY = "frequency"  # "X times per unit"


class TimeUnit(StrEnum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class Recurrence:
    """
    How a task repeats.

    amount is the X in both patterns; it is ignored for NONE.
    """

    kind: RecurrenceType = RecurrenceType.NONE
    amount: int = 0
    unit: TimeUnit = TimeUnit.DAY

    @classmethod
    def none(cls) -> Recurrence:
        return cls()

    @classmethod
    def interval(cls, amount: int, unit: TimeUnit = TimeUnit.DAY) -> Recurrence:
        return cls(RecurrenceType.INTERVAL, amount, unit)

    @classmethod
    def frequency(cls, amount: int, unit: TimeUnit = TimeUnit.DAY) -> Recurrence:
        return cls(RecurrenceType.FREQUENCY, amount, unit)

    @property
    def is_recurring(self) -> bool:
        return self.kind != RecurrenceType.NONE

    def label(self) -> str:
        if self.kind == RecurrenceType.NONE:
            return "No repeat"
        unit = self.unit.value
        if self.kind == RecurrenceType.INTERVAL:
            return f"Every {unit}" if self.amount == 1 else f"Every {self.amount} {unit}s"
        return f"Once per {unit}" if self.amount == 1 else f"{self.amount} times per {unit}"


@dataclass(slots=True)
class Task:
    """
    A tracked task.

    due_date uses 0 as "no due date". Other instants use None for "unset".
    """

    id: int
    title: str
    created_at: int

    description: str | None = None
    category: str | None = None

    due_date: int = 0
    completed: bool = False
    completed_at: int | None = None
    priority: Priority = Priority.MEDIUM
    recurrence: Recurrence = Recurrence()

    last_completed_date: int | None = None
    completions_this_period: int = 0
    current_period_start: int | None = None

    current_streak: int = 0
    longest_streak: int = 0
    last_streak_date: int | None = None

    overdue_since: int | None = None

    # Running completion stats (minutes / difficulty points).
    completion_count: int = 0
    average_completion_time: float = 0.0
    average_difficulty: float = 0.0

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring

    @property
    def has_due_date(self) -> bool:
        return bool(self.due_date)

    def recurrence_label(self) -> str:
        return self.recurrence.label()

    def progress_label(self) -> str:
        if self.recurrence.kind != RecurrenceType.FREQUENCY:
            return ""
        return f"({self.completions_this_period}/{self.recurrence.amount})"

    def needs_more_completions(self) -> bool:
        if self.recurrence.kind != RecurrenceType.FREQUENCY:
            return False
        return self.completions_this_period < self.recurrence.amount


@dataclass(frozen=True, slots=True)
class CompletionDetails:
    """Optional tracking data captured when a task is completed."""

    time_spent_minutes: int = 0
    difficulty: int | None = None  # None: use the configured default
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class CompletionRecord:
    completion_id: int
    task_id: int
    completed_at: int
    time_spent_minutes: int = 0
    difficulty: int = 0
    notes: str | None = None


# ---- edit-time validation ----


def validate_recurrence(recurrence: Recurrence) -> None:
    if not isinstance(recurrence.kind, RecurrenceType):
        raise ValidationError(f"unknown recurrence type: {recurrence.kind!r}")
    if recurrence.kind == RecurrenceType.NONE:
        return
    if not isinstance(recurrence.unit, TimeUnit):
        raise ValidationError(f"unknown recurrence unit: {recurrence.unit!r}")
    if not isinstance(recurrence.amount, int) or recurrence.amount < 1:
        raise ValidationError(f"recurrence amount must be >= 1, got {recurrence.amount!r}")


def validate_task(task: Task) -> None:
    if not task.title or not task.title.strip():
        raise ValidationError("title is required")
    validate_recurrence(task.recurrence)
    if task.recurrence.kind == RecurrenceType.NONE and (
        task.completions_this_period or task.current_period_start is not None
    ):
        raise ValidationError("non-recurring task cannot carry period state")
    if task.current_streak < 0 or task.longest_streak < 0:
        raise ValidationError("streak counters must be >= 0")
    if task.longest_streak < task.current_streak:
        raise ValidationError("longest_streak must be >= current_streak")


def validate_details(details: CompletionDetails, *, low: int = 0, high: int = 10) -> None:
    if details.time_spent_minutes < 0:
        raise ValidationError("time_spent_minutes must be >= 0")
    if details.difficulty is None or not low <= details.difficulty <= high:
        raise ValidationError(f"difficulty must be within {low}..{high}, got {details.difficulty}")
