# tests/test_statistics.py

from __future__ import annotations

from datetime import timezone

from taskmaster.tasks.statistics import (
    StatisticsAggregator,
    TaskStats,
    completion_percentage,
    summarize_history,
)
from taskmaster.tasks.task_models import CompletionRecord

from .fakes import DAY, HOUR, T0, FakeClock, RecordingCompletions, make_task


def _record(task_id: int, at: int, minutes: int = 0, difficulty: int = 0) -> CompletionRecord:
    return CompletionRecord(
        completion_id=0,
        task_id=task_id,
        completed_at=at,
        time_spent_minutes=minutes,
        difficulty=difficulty,
    )


def test_empty_collection_gives_all_zeros() -> None:
    aggregator = StatisticsAggregator(FakeClock(T0, tz=timezone.utc))

    stats = aggregator.aggregate([], RecordingCompletions())

    assert stats == TaskStats()
    assert stats.active == 0


def test_percentage_is_floored() -> None:
    assert completion_percentage(1, 3) == 33
    assert completion_percentage(2, 3) == 66
    assert completion_percentage(0, 0) == 0
    assert completion_percentage(4, 4) == 100


def test_aggregate_counts_tasks_and_history_windows() -> None:
    clock = FakeClock(T0, tz=timezone.utc)
    tasks = [
        make_task(task_id=1, completed=True, longest_streak=4),
        make_task(task_id=2, due_date=T0 - HOUR),  # overdue
        make_task(task_id=3, due_date=T0 + DAY, longest_streak=2),
    ]
    midnight = T0 - 9 * HOUR
    history = RecordingCompletions(
        records=[
            _record(1, midnight),  # today, first instant
            _record(1, T0),  # today
            _record(2, midnight - 1),  # yesterday: Sunday, previous week
            _record(3, midnight + DAY),  # tomorrow, same week
        ]
    )

    stats = StatisticsAggregator(clock).aggregate(tasks, history)

    assert stats.total == 3
    assert stats.completed == 1
    assert stats.active == 2
    assert stats.overdue == 1
    assert stats.completed_percentage == 33
    assert stats.completions_today == 2
    assert stats.completions_this_week == 3
    assert stats.best_longest_streak == 4


def test_first_weekday_moves_the_week_window() -> None:
    clock = FakeClock(T0, tz=timezone.utc)
    midnight = T0 - 9 * HOUR
    history = RecordingCompletions(records=[_record(1, midnight - DAY + HOUR)])

    monday_weeks = StatisticsAggregator(clock, first_weekday=0).aggregate([], history)
    sunday_weeks = StatisticsAggregator(clock, first_weekday=6).aggregate([], history)

    assert monday_weeks.completions_this_week == 0
    assert sunday_weeks.completions_this_week == 1


def test_summary_mentions_only_present_extras() -> None:
    plain = TaskStats(total=4, completed=1, completed_percentage=25, completions_today=1)
    assert plain.summary() == "Tasks: 1/4 (25%) | Today: 1 | Week: 0"

    busy = TaskStats(total=2, completed=0, overdue=2, best_longest_streak=3)
    assert "Overdue: 2" in busy.summary()
    assert busy.summary().endswith("Best streak: 3 days")


def test_summarize_history_skips_untracked_values() -> None:
    records = [
        _record(1, T0, minutes=30, difficulty=4),
        _record(1, T0 + DAY, minutes=10, difficulty=0),
        _record(1, T0 + 2 * DAY, minutes=0, difficulty=8),
    ]

    summary = summarize_history(records)

    assert summary.count == 3
    assert summary.average_time == 20
    assert summary.average_difficulty == 6
    assert summary.total_time == 40
    assert summarize_history([]).average_time == 0.0
