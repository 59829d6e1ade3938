# tasks/category_service.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..core.ports import RecordClient
from ..records.errors import RecordNotFoundError
from ..records.query import OrderBy
from .task_models import (
    CATEGORY_FIELDS,
    CATEGORY_TABLE,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON,
    Category,
    Task,
)

logger = logging.getLogger(__name__)

_EDITABLE = frozenset({"name", "color", "icon", "task_count"})


class CategoryService:
    def __init__(self, records: RecordClient) -> None:
        self._records = records

    def get_all(self) -> list[Category]:
        rows = self._records.fetch_records(CATEGORY_TABLE, fields=CATEGORY_FIELDS, order_by=(OrderBy("Id"),))
        return [Category.from_record(r) for r in rows]

    def get_by_id(self, category_id: int) -> Category | None:
        row = self._records.get_record(CATEGORY_TABLE, int(category_id), fields=CATEGORY_FIELDS)
        return Category.from_record(row) if row else None

    def find(self, ref: str) -> Category | None:
        """Look a category up by id or (case-insensitive) name."""
        ref = (ref or "").strip()
        if not ref:
            return None
        if ref.isdigit():
            return self.get_by_id(int(ref))
        wanted = ref.lower()
        for c in self.get_all():
            if c.name.lower() == wanted:
                return c
        return None

    def create(
        self,
        *,
        name: str | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Category:
        record = {
            "name": (name or "").strip() or "New Category",
            "color": color or DEFAULT_CATEGORY_COLOR,
            "icon": icon or DEFAULT_CATEGORY_ICON,
            "task_count": 0,
        }
        (created,) = self._records.create_records(CATEGORY_TABLE, [record])
        return Category.from_record(created)

    def update(self, category_id: int, **changes: Any) -> Category:
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValueError(f"cannot update category fields: {', '.join(sorted(unknown))}")
        if "name" in changes:
            name = str(changes["name"] or "").strip()
            if not name:
                raise ValueError("category name is required")
            changes["name"] = name
        if self.get_by_id(category_id) is None:
            raise RecordNotFoundError("Category not found")
        (updated,) = self._records.update_records(CATEGORY_TABLE, [{"Id": int(category_id), **changes}])
        return Category.from_record(updated)

    def delete(self, category_id: int) -> Category:
        category = self.get_by_id(category_id)
        if category is None:
            raise RecordNotFoundError("Category not found")
        self._records.delete_records(CATEGORY_TABLE, [int(category_id)])
        return category

    def update_task_count(self, category_id: int, count: int) -> Category | None:
        if self.get_by_id(category_id) is None:
            return None
        return self.update(category_id, task_count=max(0, int(count)))

    def sync_task_counts(self, tasks: Iterable[Task], categories: list[Category] | None = None) -> list[Category]:
        """
        Recompute the denormalized task counts from a task snapshot.

        Only categories whose stored count differs are written back.
        """
        if categories is None:
            categories = self.get_all()

        counts: dict[int, int] = {}
        for t in tasks:
            if t.category_id is not None:
                counts[t.category_id] = counts.get(t.category_id, 0) + 1

        stale = [c for c in categories if c.task_count != counts.get(c.id, 0)]
        if stale:
            self._records.update_records(
                CATEGORY_TABLE,
                [{"Id": c.id, "task_count": counts.get(c.id, 0)} for c in stale],
            )
            logger.debug("Synced task counts for %d categories", len(stale))

        for c in categories:
            c.task_count = counts.get(c.id, 0)
        return categories
