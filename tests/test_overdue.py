# tests/test_overdue.py

from __future__ import annotations

from datetime import timezone

from taskmaster.tasks.overdue import (
    format_duration,
    is_due_today,
    is_overdue,
    next_appearance,
    overdue_duration,
    stamp_overdue,
)
from taskmaster.tasks.task_models import Recurrence

from .fakes import DAY, HOUR, T0, make_task


def test_task_without_due_date_is_never_overdue() -> None:
    task = make_task(due_date=0)

    assert is_overdue(task, 10**15) is False
    assert overdue_duration(task, 10**15) == 0
    assert is_due_today(task, T0, timezone.utc) is False


def test_overdue_requires_active_and_strictly_past_due() -> None:
    task = make_task(due_date=T0)

    assert is_overdue(task, T0) is False
    assert is_overdue(task, T0 + 1) is True
    assert overdue_duration(task, T0 + 3 * HOUR) == 3 * HOUR

    done = make_task(due_date=T0, completed=True)
    assert is_overdue(done, T0 + DAY) is False
    assert overdue_duration(done, T0 + DAY) == 0


def test_due_today_uses_calendar_day() -> None:
    utc = timezone.utc
    # T0 is 09:00; midnight is 9 hours earlier.
    midnight = T0 - 9 * HOUR

    assert is_due_today(make_task(due_date=midnight), T0, utc) is True
    assert is_due_today(make_task(due_date=midnight + DAY - 1), T0, utc) is True
    assert is_due_today(make_task(due_date=midnight + DAY), T0, utc) is False
    assert is_due_today(make_task(due_date=midnight - 1), T0, utc) is False


def test_stamp_overdue_only_first_time() -> None:
    task = make_task(due_date=T0 - HOUR)

    stamped = stamp_overdue(task, T0)
    assert stamped is not None
    assert stamped.overdue_since == T0

    assert stamp_overdue(stamped, T0 + DAY) is None
    assert stamp_overdue(make_task(due_date=T0 + HOUR), T0) is None


def test_next_appearance_for_completed_interval_task() -> None:
    waiting = make_task(recurrence=Recurrence.interval(2), completed=True, due_date=T0 + DAY)

    assert next_appearance(waiting, T0) == DAY
    assert next_appearance(waiting, T0 + 2 * DAY) == 0
    assert next_appearance(make_task(due_date=T0 + DAY, completed=True), T0) is None
    assert next_appearance(make_task(recurrence=Recurrence.interval(1), due_date=T0), T0) is None


def test_format_duration_is_coarse() -> None:
    assert format_duration(3 * DAY + 5 * HOUR) == "3 days"
    assert format_duration(DAY) == "1 day"
    assert format_duration(2 * HOUR) == "2 hours"
    assert format_duration(HOUR + 1) == "1 hour"
    assert format_duration(60_000) == "1 minute"
    assert format_duration(0) == "0 minutes"
