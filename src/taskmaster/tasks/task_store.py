# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace

from ..core.errors import NotFoundError, ValidationError
from .task_models import CompletionRecord, Task, validate_task

logger = logging.getLogger(__name__)


class InMemoryTaskStore:
    """
    In-memory task + completion-history store.

    Implements both persistence ports (TaskRepo and CompletionRepo).

    Thread-safety:
    - every public method runs under one re-entrant lock
    - tasks are stored and returned as copies, so callers never alias store state
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tasks: dict[int, Task] = {}
        self._completions: dict[int, CompletionRecord] = {}
        self._task_ids = itertools.count(1)
        self._completion_ids = itertools.count(1)
        logger.info("InMemoryTaskStore ready")

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def save_task(self, task: Task) -> Task:
        validate_task(task)
        with self._lock:
            if task.id == 0:
                stored = replace(task, id=next(self._task_ids))
                self._tasks[stored.id] = stored
                logger.debug("Task added id=%s title=%r", stored.id, stored.title)
            else:
                if task.id not in self._tasks:
                    raise NotFoundError(task.id)
                stored = replace(task)
                self._tasks[stored.id] = stored
                logger.debug("Task updated id=%s completed=%s", stored.id, stored.completed)
            return replace(stored)

    def load_task(self, task_id: int) -> Task | None:
        with self._lock:
            task = self._tasks.get(int(task_id))
            return replace(task) if task is not None else None

    def query_all_tasks(self) -> list[Task]:
        """All tasks, newest first."""
        with self._lock:
            tasks = [replace(t) for t in self._tasks.values()]
        tasks.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return tasks

    def delete_task(self, task_id: int) -> None:
        """Delete a task and cascade its completion records."""
        with self._lock:
            if self._tasks.pop(int(task_id), None) is None:
                raise NotFoundError(task_id)
            doomed = [cid for cid, rec in self._completions.items() if rec.task_id == task_id]
            for cid in doomed:
                del self._completions[cid]
        logger.info("Task deleted id=%s completions_removed=%d", task_id, len(doomed))

    # ---- completion history ----

    def append_completion(self, record: CompletionRecord) -> int:
        with self._lock:
            if record.task_id not in self._tasks:
                raise NotFoundError(record.task_id)
            if record.time_spent_minutes < 0:
                raise ValidationError("time_spent_minutes must be >= 0")
            stored = replace(record, completion_id=next(self._completion_ids))
            self._completions[stored.completion_id] = stored
        logger.debug("Completion recorded id=%s task_id=%s", stored.completion_id, stored.task_id)
        return stored.completion_id

    def count_completions(self, task_id: int | None = None, *, start: int, end: int) -> int:
        with self._lock:
            return sum(
                1
                for rec in self._completions.values()
                if (task_id is None or rec.task_id == task_id) and start <= rec.completed_at < end
            )

    def list_completions(self, task_id: int) -> list[CompletionRecord]:
        """Completion history for a task, most recent first."""
        with self._lock:
            out = [rec for rec in self._completions.values() if rec.task_id == task_id]
        out.sort(key=lambda r: (r.completed_at, r.completion_id), reverse=True)
        return out
