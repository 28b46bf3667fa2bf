# src/taskmaster/tasks/task_scheduler.py

from __future__ import annotations

"""
Recurring-task sweeper.

A small polling loop that:
- loads all tasks,
- reactivates completed interval tasks whose due date has passed,
- optionally closes lapsed frequency periods,
- stamps overdue_since the first time a task is seen overdue,
- saves each changed task on its own, logging and skipping failures.

Notification delivery belongs to the caller, not the sweeper.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.clock import Clock
from ..core.errors import NotFoundError, PersistenceError
from ..core.ports import TaskRepo
from .overdue import stamp_overdue
from .recurrence import period_lapsed, reset_frequency, reset_interval, should_reset_interval
from .task_locks import TaskLocks
from .task_models import Task

logger = logging.getLogger(__name__)


def sweep_recurring(now_ms: int, tasks: Iterable[Task], *, frequency_periods: bool = False) -> list[Task]:
    """
    Tasks that need a save after a recurrence sweep at now_ms.

    Interval tasks that are completed with due_date <= now become active again
    with their due date pushed one more interval. With frequency_periods=True,
    frequency tasks whose period has lapsed get their counter cleared too.
    """
    out: list[Task] = []
    for task in tasks:
        updated = _sweep_one(task, now_ms, frequency_periods=frequency_periods)
        if updated is not None:
            out.append(updated)
    return out


def _sweep_one(task: Task, now_ms: int, *, frequency_periods: bool) -> Task | None:
    if should_reset_interval(task, now_ms):
        return reset_interval(task)
    if frequency_periods and period_lapsed(task, now_ms):
        return reset_frequency(task)
    return None


@dataclass(slots=True)
class SweepReport:
    checked: int = 0
    reset: int = 0
    stamped: int = 0
    skipped: int = 0
    failed: int = 0


def run_sweep_once(
        task_store: TaskRepo,
        clock: Clock,
        *,
        locks: TaskLocks | None = None,
        frequency_periods: bool = False,
        stamp_overdue_tasks: bool = True,
) -> SweepReport:
    """
    One sweep pass over every stored task.

    Each task is reloaded and saved under its own lock, so a concurrent
    completion is never overwritten with a stale snapshot. A failing task is
    logged and skipped; the rest of the batch still runs.
    """
    locks = locks or TaskLocks()
    report = SweepReport()
    now_ms = clock.now_ms()

    try:
        snapshot = task_store.query_all_tasks()
    except Exception:
        logger.exception("query_all_tasks failed")
        return report

    for candidate in snapshot:
        report.checked += 1
        task_id = candidate.id

        # Cheap pre-check on the snapshot; the locked section re-checks fresh state.
        if _sweep_one(candidate, now_ms, frequency_periods=frequency_periods) is None and not (
            stamp_overdue_tasks and stamp_overdue(candidate, now_ms) is not None
        ):
            continue

        try:
            with locks.hold(task_id):
                task = task_store.load_task(task_id)
                if task is None:
                    raise NotFoundError(task_id)

                changed = False
                updated = _sweep_one(task, now_ms, frequency_periods=frequency_periods)
                if updated is not None:
                    task = updated
                    report.reset += 1
                    changed = True

                if stamp_overdue_tasks:
                    stamped = stamp_overdue(task, now_ms)
                    if stamped is not None:
                        task = stamped
                        report.stamped += 1
                        changed = True

                if changed:
                    task_store.save_task(task)
                    logger.info(
                        "Task %s swept completed=%s due=%s overdue_since=%s",
                        task_id,
                        task.completed,
                        task.due_date,
                        task.overdue_since,
                    )
        except NotFoundError:
            report.skipped += 1
            logger.warning("Task %s vanished during sweep; skipping", task_id)
        except PersistenceError:
            report.failed += 1
            logger.exception("save_task failed during sweep task_id=%s", task_id)
        except Exception:
            report.failed += 1
            logger.exception("sweep failed task_id=%s", task_id)

    if report.reset or report.stamped or report.failed:
        logger.info(
            "Sweep done checked=%d reset=%d stamped=%d skipped=%d failed=%d",
            report.checked,
            report.reset,
            report.stamped,
            report.skipped,
            report.failed,
        )
    return report


async def run_recurrence_sweeper(
        task_store: TaskRepo,
        clock: Clock,
        *,
        interval_seconds: float = 60.0,
        locks: TaskLocks | None = None,
        frequency_periods: bool = False,
        stamp_overdue_tasks: bool = True,
) -> None:
    """
    Simple polling sweeper.

    Every interval_seconds, run one sweep pass (see run_sweep_once).
    To stop the sweeper, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    locks = locks or TaskLocks()

    while True:
        try:
            run_sweep_once(
                task_store,
                clock,
                locks=locks,
                frequency_periods=frequency_periods,
                stamp_overdue_tasks=stamp_overdue_tasks,
            )
        except Exception:
            logger.exception("recurrence sweep pass failed")

        await asyncio.sleep(sleep_s)
