# src/taskmaster/tasks/task_api.py

"""
Entry points for UI / notification collaborators.

Each mutating helper reloads the task under its per-task lock, computes the
new snapshot and saves it. On failure the computed snapshot is dropped and the
error goes to the caller, who should reload from the store.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.errors import NotFoundError, PersistenceError, ValidationError
from ..core.state import AppState
from .overdue import is_due_today, is_overdue, overdue_duration
from .statistics import HistorySummary, TaskStats, summarize_history
from .task_filters import TaskFilter
from .task_scheduler import SweepReport, run_recurrence_sweeper, run_sweep_once
from .task_models import CompletionDetails, Priority, Recurrence, Task

logger = logging.getLogger(__name__)

_UNSET: object = object()


def create_task(
    state: AppState,
    *,
    title: str,
    description: str | None = None,
    category: str | None = None,
    due_date: int = 0,
    priority: Priority = Priority.MEDIUM,
    recurrence: Recurrence | None = None,
) -> Task:
    task = Task(
        id=0,
        title=(title or "").strip(),
        created_at=state.clock.now_ms(),
        description=description,
        category=(category or "").strip() or None,
        due_date=int(due_date or 0),
        priority=priority,
        recurrence=recurrence or Recurrence.none(),
    )
    saved = _save(state, task)
    logger.info("Task created id=%s recurrence=%s", saved.id, saved.recurrence_label())
    return saved


def edit_task(
    state: AppState,
    task_id: int,
    *,
    title: str | None = None,
    description: object = _UNSET,
    category: object = _UNSET,
    due_date: int | None = None,
    priority: Priority | None = None,
    recurrence: Recurrence | None = None,
) -> Task:
    """
    Update editable fields. Changing the recurrence kind drops period state
    that no longer applies.
    """
    with state.locks.hold(task_id):
        task = _load(state, task_id)
        changes: dict[str, object] = {}
        if title is not None:
            changes["title"] = title.strip()
        if description is not _UNSET:
            changes["description"] = description
        if category is not _UNSET:
            changes["category"] = (str(category).strip() or None) if category else None
        if due_date is not None:
            changes["due_date"] = int(due_date)
        if priority is not None:
            changes["priority"] = priority
        if recurrence is not None:
            changes["recurrence"] = recurrence
            if recurrence.kind != task.recurrence.kind or recurrence.unit != task.recurrence.unit:
                changes["completions_this_period"] = 0
                changes["current_period_start"] = None

        updated = replace(task, **changes)
        return _save(state, updated)


def complete_task(state: AppState, task_id: int, details: CompletionDetails | None = None) -> Task:
    with state.locks.hold(task_id):
        task = _load(state, task_id)
        updated = state.recorder.complete(task, details)
        return _save(state, updated)


def uncomplete_task(state: AppState, task_id: int) -> Task:
    with state.locks.hold(task_id):
        task = _load(state, task_id)
        return _save(state, state.recorder.uncomplete(task))


def delete_task(state: AppState, task_id: int) -> None:
    with state.locks.hold(task_id):
        try:
            state.task_store.delete_task(task_id)
        except NotFoundError:
            raise
        except Exception as exc:
            raise PersistenceError(f"failed to delete task {task_id}") from exc
    state.locks.forget(task_id)


def list_tasks(state: AppState, task_filter: TaskFilter | None = None) -> list[Task]:
    tasks = state.task_store.query_all_tasks()
    if task_filter is None:
        return tasks
    return task_filter.apply(tasks)


def get_statistics(state: AppState) -> TaskStats:
    return state.aggregator.aggregate(state.task_store.query_all_tasks(), state.task_store)


def get_history_summary(state: AppState, task_id: int) -> HistorySummary:
    return summarize_history(state.task_store.list_completions(task_id))


def overdue_tasks(state: AppState) -> list[Task]:
    now_ms = state.clock.now_ms()
    tasks = [t for t in state.task_store.query_all_tasks() if is_overdue(t, now_ms)]
    # Longest overdue first.
    tasks.sort(key=lambda t: overdue_duration(t, now_ms), reverse=True)
    return tasks


def due_today(state: AppState) -> list[Task]:
    now_ms = state.clock.now_ms()
    return [
        t
        for t in state.task_store.query_all_tasks()
        if not t.completed and is_due_today(t, now_ms, state.clock.tz)
    ]


def run_sweep(state: AppState) -> SweepReport:
    """One recurrence/overdue sweep pass with the configured options."""
    return run_sweep_once(
        state.task_store,
        state.clock,
        locks=state.locks,
        frequency_periods=bool(getattr(state.settings, "sweep_frequency_periods", False)),
        stamp_overdue_tasks=bool(getattr(state.settings, "stamp_overdue", True)),
    )


async def run_sweeper(state: AppState) -> None:
    """Background sweeper loop for this state; cancel the task to stop it."""
    await run_recurrence_sweeper(
        state.task_store,
        state.clock,
        interval_seconds=float(getattr(state.settings, "sweep_interval_seconds", 60.0)),
        locks=state.locks,
        frequency_periods=bool(getattr(state.settings, "sweep_frequency_periods", False)),
        stamp_overdue_tasks=bool(getattr(state.settings, "stamp_overdue", True)),
    )


# ---- helpers ----


def _load(state: AppState, task_id: int) -> Task:
    task = state.task_store.load_task(task_id)
    if task is None:
        raise NotFoundError(task_id)
    return task


def _save(state: AppState, task: Task) -> Task:
    try:
        return state.task_store.save_task(task)
    except (NotFoundError, ValidationError, PersistenceError):
        raise
    except Exception as exc:
        logger.exception("save_task failed task_id=%s", task.id)
        raise PersistenceError(f"failed to save task {task.id}") from exc
