# src/taskmaster/core/errors.py

from __future__ import annotations


class TaskmasterError(Exception):
    """Base class for errors raised by the task core."""


class ValidationError(TaskmasterError, ValueError):
    """Malformed task or completion data, rejected at edit/entry time."""


class NotFoundError(TaskmasterError, LookupError):
    """The task id no longer exists in the persistence layer."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


class PersistenceError(TaskmasterError, RuntimeError):
    """A save/append performed by the persistence collaborator failed."""
