# tasks/task_service.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any

from ..core.ports import RecordClient
from ..records.errors import RecordNotFoundError
from ..records.query import Condition, OrderBy
from .task_filters import TaskFilters, search_tasks
from .task_models import (
    ALL,
    TASK_FIELDS,
    TASK_TABLE,
    DueBucket,
    Priority,
    StatusFilter,
    Task,
    task_fields_to_record,
    utc_now,
)

logger = logging.getLogger(__name__)

_ORDER = (OrderBy("Id"),)

_EDITABLE = frozenset({"title", "description", "category_id", "priority", "due_date", "completed"})


class TaskService:
    """Task CRUD over the `task` record table."""

    def __init__(self, records: RecordClient) -> None:
        self._records = records

    def _fetch(self, where: Iterable[Condition] = ()) -> list[Task]:
        rows = self._records.fetch_records(TASK_TABLE, fields=TASK_FIELDS, where=tuple(where), order_by=_ORDER)
        return [Task.from_record(r) for r in rows]

    def get_all(self) -> list[Task]:
        return self._fetch()

    def get_by_id(self, task_id: int) -> Task | None:
        row = self._records.get_record(TASK_TABLE, int(task_id), fields=TASK_FIELDS)
        return Task.from_record(row) if row else None

    def get_by_category(self, category_id: int) -> list[Task]:
        return self._fetch([Condition.eq("category_id", int(category_id))])

    def create(
        self,
        *,
        title: str,
        description: str = "",
        category_id: int | None = None,
        priority: Priority | str = Priority.MEDIUM,
        due_date: date | str | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = utc_now()
        record = task_fields_to_record(
            title=title,
            description=description,
            category_id=category_id,
            priority=priority,
            due_date=due_date,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        (created,) = self._records.create_records(TASK_TABLE, [record])
        task = Task.from_record(created)
        logger.debug("Task created id=%s priority=%s due=%s", task.id, task.priority.value, task.due_date)
        return task

    def update(self, task_id: int, **changes: Any) -> Task:
        """Partial update; `updated_at` is always refreshed."""
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValueError(f"cannot update task fields: {', '.join(sorted(unknown))}")
        if "title" in changes and not str(changes["title"] or "").strip():
            raise ValueError("title is required")

        if self.get_by_id(task_id) is None:
            raise RecordNotFoundError("Task not found")

        record = task_fields_to_record(**changes, updated_at=utc_now())
        record["Id"] = int(task_id)
        (updated,) = self._records.update_records(TASK_TABLE, [record])
        return Task.from_record(updated)

    def toggle_complete(self, task_id: int) -> Task:
        task = self.get_by_id(task_id)
        if task is None:
            raise RecordNotFoundError("Task not found")
        updated = self.update(task_id, completed=not task.completed)
        logger.info("Task %s -> %s", task_id, "completed" if updated.completed else "pending")
        return updated

    def delete(self, task_id: int) -> Task:
        task = self.get_by_id(task_id)
        if task is None:
            raise RecordNotFoundError("Task not found")
        self._records.delete_records(TASK_TABLE, [int(task_id)])
        return task

    def bulk_delete(self, task_ids: Iterable[int]) -> list[int]:
        """Delete many tasks; ids that do not exist are skipped. Returns the deleted ids."""
        ids = [int(i) for i in task_ids]
        if not ids:
            return []
        deleted = self._records.delete_records(TASK_TABLE, ids)
        logger.info("Bulk delete: %d requested, %d deleted", len(ids), len(deleted))
        return deleted

    def search(self, query: str) -> list[Task]:
        return search_tasks(self.get_all(), query)

    def get_by_filters(self, filters: TaskFilters, *, today: date | None = None) -> list[Task]:
        """
        Same result as filter_tasks(get_all(), filters), evaluated by the backend.

        Dates are stored as YYYY-MM-DD strings, so range conditions on them
        compare in calendar order.
        """
        if today is None:
            today = date.today()
        day = today.isoformat()

        where: list[Condition] = []
        if filters.category_id is not None:
            where.append(Condition.eq("category_id", int(filters.category_id)))
        if filters.priority != ALL:
            where.append(Condition.eq("priority", Priority.from_raw(filters.priority).value))
        if filters.status == StatusFilter.COMPLETED:
            where.append(Condition.eq("completed", True))
        elif filters.status == StatusFilter.PENDING:
            where.append(Condition.eq("completed", False))

        if filters.due_date == DueBucket.TODAY:
            where.append(Condition.eq("due_date", day))
        elif filters.due_date == DueBucket.OVERDUE:
            where.append(Condition.lt("due_date", day))
            where.append(Condition.eq("completed", False))
        elif filters.due_date == DueBucket.UPCOMING:
            where.append(Condition.gt("due_date", day))

        return self._fetch(where)
