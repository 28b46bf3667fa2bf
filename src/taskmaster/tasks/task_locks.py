# src/taskmaster/tasks/task_locks.py

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator


class TaskLocks:
    """
    One lock per task id.

    Every read-modify-write of a task (UI completion, periodic sweep) should run
    inside `with locks.hold(task_id):` and reload the task first.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def __contains__(self, task_id: object) -> bool:
        with self._guard:
            return task_id in self._locks

    def _lock_for(self, task_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(task_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[task_id] = lock
            return lock

    @contextlib.contextmanager
    def hold(self, task_id: int) -> Iterator[None]:
        lock = self._lock_for(int(task_id))
        with lock:
            yield

    def forget(self, task_id: int) -> None:
        """Drop the lock of a deleted task."""
        with self._guard:
            self._locks.pop(int(task_id), None)
