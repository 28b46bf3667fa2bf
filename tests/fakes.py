# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo

from taskmaster.core.clock import DAY_MS, HOUR_MS
from taskmaster.core.errors import PersistenceError
from taskmaster.tasks.task_models import CompletionRecord, Recurrence, Task
from taskmaster.tasks.task_store import InMemoryTaskStore

# Monday 2024-01-01 09:00:00 UTC
T0 = 1_704_099_600_000
DAY = DAY_MS
HOUR = HOUR_MS


class FakeClock:
    """Settable clock for deterministic tests."""

    def __init__(self, now_ms: int, tz: tzinfo | None = None) -> None:
        self.now = now_ms
        self.tz = tz

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_task(
    *,
    task_id: int = 1,
    title: str = "Water plants",
    recurrence: Recurrence | None = None,
    created_at: int = T0 - DAY,
    **fields,
) -> Task:
    return Task(
        id=task_id,
        title=title,
        created_at=created_at,
        recurrence=recurrence or Recurrence.none(),
        **fields,
    )


@dataclass(slots=True)
class RecordingCompletions:
    """
    Fake CompletionRepo used by recorder tests.

    Captures appended records; can be told to fail.
    """

    records: list[CompletionRecord] = field(default_factory=list)
    fail: bool = False

    def append_completion(self, record: CompletionRecord) -> int:
        if self.fail:
            raise OSError("disk full")
        self.records.append(record)
        return len(self.records)

    def count_completions(self, task_id: int | None = None, *, start: int, end: int) -> int:
        return sum(
            1
            for r in self.records
            if (task_id is None or r.task_id == task_id) and start <= r.completed_at < end
        )

    def list_completions(self, task_id: int) -> list[CompletionRecord]:
        return [r for r in self.records if r.task_id == task_id]


class FlakyTaskStore(InMemoryTaskStore):
    """In-memory store whose save_task fails for selected task ids."""

    def __init__(self, failing_ids: set[int] | None = None) -> None:
        super().__init__()
        self.failing_ids = set(failing_ids or ())

    def save_task(self, task: Task) -> Task:
        if task.id in self.failing_ids:
            raise PersistenceError(f"cannot save task {task.id}")
        return super().save_task(task)
