# src/taskmaster/tasks/task_filters.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .task_models import Task


class CompletionFilter(StrEnum):
    ALL = "all"
    ACTIVE_ONLY = "active"
    COMPLETED_ONLY = "completed"


class SortOption(StrEnum):
    PRIORITY = "priority"  # high to low
    DUE_DATE = "due_date"  # nearest first, undated last
    CREATED = "created"  # newest first
    TITLE = "title"  # A-Z, case-insensitive
    CATEGORY = "category"  # then priority


@dataclass(frozen=True, slots=True)
class TaskFilter:
    search: str = ""
    category: str | None = None
    completion: CompletionFilter = CompletionFilter.ALL
    sort: SortOption = SortOption.PRIORITY

    def matches(self, task: Task) -> bool:
        if self.completion == CompletionFilter.ACTIVE_ONLY and task.completed:
            return False
        if self.completion == CompletionFilter.COMPLETED_ONLY and not task.completed:
            return False
        if self.category and task.category != self.category:
            return False

        query = (self.search or "").strip().lower()
        if not query:
            return True
        haystacks = (task.title, task.description, task.category)
        return any(h and query in h.lower() for h in haystacks)

    def apply(self, tasks: Iterable[Task]) -> list[Task]:
        return sort_tasks([t for t in tasks if self.matches(t)], self.sort)


def sort_tasks(tasks: list[Task], option: SortOption) -> list[Task]:
    if option == SortOption.PRIORITY:
        return sorted(tasks, key=lambda t: -int(t.priority))
    if option == SortOption.DUE_DATE:
        return sorted(tasks, key=lambda t: (not t.due_date, t.due_date or 0))
    if option == SortOption.CREATED:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if option == SortOption.TITLE:
        return sorted(tasks, key=lambda t: (t.title or "").lower())
    if option == SortOption.CATEGORY:
        return sorted(tasks, key=lambda t: ((t.category or "").lower(), -int(t.priority)))
    return list(tasks)
