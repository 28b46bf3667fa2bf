# src/taskmaster/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
Persistence is an external collaborator; the bundled in-memory store is one
implementation, a database-backed one would be another.
"""

from typing import Protocol

from ..tasks.task_models import CompletionRecord, Task


class TaskRepo(Protocol):
    def load_task(self, task_id: int) -> Task | None: ...

    def save_task(self, task: Task) -> Task:
        """Insert (id == 0) or update. Returns the stored copy (with its id)."""
        ...

    def query_all_tasks(self) -> list[Task]: ...

    def delete_task(self, task_id: int) -> None: ...


class CompletionRepo(Protocol):
    def append_completion(self, record: CompletionRecord) -> int: ...

    def count_completions(
            self,
            task_id: int | None = None,
            *,
            start: int,
            end: int,
    ) -> int:
        """Completions with start <= completed_at < end, for one task or all (None)."""
        ...

    def list_completions(self, task_id: int) -> list[CompletionRecord]: ...


class TaskStoreLike(TaskRepo, CompletionRepo, Protocol):
    """Both sides of the persistence collaborator, as wired by the composition root."""
