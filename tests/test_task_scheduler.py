# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio

import pytest

from taskmaster.tasks.task_models import Recurrence, TimeUnit
from taskmaster.tasks.task_scheduler import run_recurrence_sweeper, run_sweep_once, sweep_recurring
from taskmaster.tasks.task_store import InMemoryTaskStore

from .fakes import DAY, HOUR, T0, FakeClock, FlakyTaskStore, make_task


def _add(store: InMemoryTaskStore, **fields):
    return store.save_task(make_task(task_id=0, **fields))


def test_sweep_recurring_only_returns_changed_tasks() -> None:
    waiting = make_task(
        task_id=1,
        recurrence=Recurrence.interval(2, TimeUnit.DAY),
        completed=True,
        completed_at=T0 - 2 * DAY,
        due_date=T0,
    )
    not_yet = make_task(task_id=2, recurrence=Recurrence.interval(1), completed=True, due_date=T0 + 1)
    lapsed = make_task(
        task_id=3,
        recurrence=Recurrence.frequency(2, TimeUnit.DAY),
        completed=True,
        completions_this_period=2,
        current_period_start=T0 - 2 * DAY,
    )

    changed = sweep_recurring(T0, [waiting, not_yet, lapsed])

    assert [t.id for t in changed] == [1]
    assert changed[0].completed is False
    assert changed[0].completed_at is None
    assert changed[0].due_date == T0 + 2 * DAY

    with_periods = sweep_recurring(T0, [waiting, not_yet, lapsed], frequency_periods=True)
    assert [t.id for t in with_periods] == [1, 3]
    assert with_periods[1].completions_this_period == 0


def test_run_sweep_once_resets_and_stamps(store: InMemoryTaskStore, clock: FakeClock) -> None:
    interval = _add(store, recurrence=Recurrence.interval(1), completed=True, due_date=T0 - HOUR)
    late = _add(store, title="File taxes", due_date=T0 - DAY)
    fine = _add(store, title="Later", due_date=T0 + DAY)

    report = run_sweep_once(store, clock)

    assert report.checked == 3
    assert report.reset == 1
    assert report.failed == 0

    reset = store.load_task(interval.id)
    assert reset.completed is False
    assert reset.due_date == T0 - HOUR + DAY

    assert store.load_task(late.id).overdue_since == T0
    assert store.load_task(fine.id).overdue_since is None

    # A second pass has nothing new to stamp.
    clock.advance(HOUR)
    again = run_sweep_once(store, clock)
    assert again.stamped == 0
    assert store.load_task(late.id).overdue_since == T0


def test_stamping_can_be_turned_off(store: InMemoryTaskStore, clock: FakeClock) -> None:
    late = _add(store, due_date=T0 - DAY)

    report = run_sweep_once(store, clock, stamp_overdue_tasks=False)

    assert report.stamped == 0
    assert store.load_task(late.id).overdue_since is None


def test_failing_save_does_not_stop_the_batch(clock: FakeClock) -> None:
    store = FlakyTaskStore()
    broken = _add(store, title="broken", recurrence=Recurrence.interval(1), completed=True, due_date=T0 - 1)
    healthy = _add(store, title="healthy", recurrence=Recurrence.interval(1), completed=True, due_date=T0 - 1)
    store.failing_ids.add(broken.id)

    report = run_sweep_once(store, clock)

    assert report.failed == 1
    assert report.reset >= 1
    assert store.load_task(broken.id).completed is True
    assert store.load_task(healthy.id).completed is False


@pytest.mark.asyncio
async def test_sweeper_loop_runs_until_cancelled(store: InMemoryTaskStore, clock: FakeClock) -> None:
    task = _add(store, recurrence=Recurrence.interval(1), completed=True, due_date=T0 - HOUR)

    runner = asyncio.create_task(run_recurrence_sweeper(store, clock, interval_seconds=0.01))

    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    swept = store.load_task(task.id)
    assert swept.completed is False
    assert swept.due_date == T0 - HOUR + DAY
