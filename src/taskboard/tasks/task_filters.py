# tasks/task_filters.py

"""
Client-side task filtering and search.

Everything here is pure: (task list, criteria, today) -> new list.
Predicates are ANDed, so the order of application never matters.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date

from .task_models import ALL, DueBucket, Priority, StatusFilter, Task, parse_date

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True, slots=True)
class TaskFilters:
    priority: Priority | str = ALL
    due_date: DueBucket = DueBucket.ALL
    status: StatusFilter = StatusFilter.ALL
    category_id: int | None = None

    def with_changes(self, **changes) -> TaskFilters:
        return replace(self, **changes)


NO_FILTERS = TaskFilters()


def has_active_filters(filters: TaskFilters) -> bool:
    """Whether any of the filter-bar selections differ from "all" (category is a route, not a filter)."""
    return (
        filters.priority != ALL
        or filters.due_date != DueBucket.ALL
        or filters.status != StatusFilter.ALL
    )


def matches_due_bucket(task: Task, bucket: DueBucket, today: date) -> bool:
    if bucket == DueBucket.ALL:
        return True
    due = task.due_date
    if due is None:
        return False
    if bucket == DueBucket.TODAY:
        return due == today
    if bucket == DueBucket.OVERDUE:
        return due < today and not task.completed
    if bucket == DueBucket.UPCOMING:
        return due > today
    return True


def matches_filters(task: Task, filters: TaskFilters, today: date) -> bool:
    if filters.priority != ALL and task.priority != filters.priority:
        return False

    if filters.status == StatusFilter.COMPLETED and not task.completed:
        return False
    if filters.status == StatusFilter.PENDING and task.completed:
        return False

    if filters.category_id is not None and task.category_id != filters.category_id:
        return False

    return matches_due_bucket(task, filters.due_date, today)


def filter_tasks(
    tasks: Iterable[Task],
    filters: TaskFilters,
    *,
    today: date | None = None,
) -> list[Task]:
    if today is None:
        today = date.today()
    return [t for t in tasks if matches_filters(t, filters, today)]


def search_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    """Case-insensitive substring search over title and description."""
    q = (query or "").strip().lower()
    if not q:
        return list(tasks)
    return [t for t in tasks if q in t.title.lower() or q in t.description.lower()]


def parse_filter_args(args: Iterable[str], base: TaskFilters = NO_FILTERS) -> TaskFilters:
    """
    Parse "key=value" tokens into filters on top of `base`.

    Keys: priority, due, status. Raises ValueError on unknown keys/values.
    """
    out = base
    for token in args:
        key, sep, value = token.partition("=")
        key = key.strip().lower()
        value = value.strip().lower()
        if not sep or not value:
            raise ValueError(f"expected key=value, got: {token}")

        if key == "priority":
            if value != ALL and value not in {p.value for p in Priority}:
                raise ValueError(f"unknown priority: {value}")
            out = out.with_changes(priority=ALL if value == ALL else Priority(value))
        elif key in ("due", "due_date"):
            try:
                out = out.with_changes(due_date=DueBucket(value))
            except ValueError:
                raise ValueError(f"unknown due bucket: {value}") from None
        elif key == "status":
            try:
                out = out.with_changes(status=StatusFilter(value))
            except ValueError:
                raise ValueError(f"unknown status: {value}") from None
        else:
            raise ValueError(f"unknown filter: {key}")
    return out


def due_badge(task: Task, today: date | None = None) -> str | None:
    """Short due-date label shown on a task card."""
    due = parse_date(task.due_date)
    if due is None:
        return None
    if today is None:
        today = date.today()
    if due < today and not task.completed:
        return "Overdue"
    if due == today:
        return "Due today"
    return f"{_MONTHS[due.month - 1]} {due.day}"
