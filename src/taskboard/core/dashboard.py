# src/taskboard/core/dashboard.py

"""
Dashboard controller: the in-memory state behind the task page.

Holds the loaded tasks, the active category, the search query, the filter
bar selections and the bulk selection. Record errors never escape from here:
they are logged, surfaced as a notification, and the view falls back to
empty/unchanged data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..records.errors import RecordApiError, friendly_record_error_message
from ..tasks.category_service import CategoryService
from ..tasks.stats_service import StatsService
from ..tasks.task_filters import NO_FILTERS, TaskFilters, filter_tasks
from ..tasks.task_models import Category, Priority, Task
from ..tasks.task_service import TaskService
from ..tasks.task_stats import DayActivity, UserStats, compute_user_stats
from .ports import Notifier

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StatsSnapshot:
    user: UserStats
    weekly: list[DayActivity]


@dataclass(slots=True)
class SidebarSnapshot:
    categories: list[Category]
    stats: UserStats


@dataclass
class Dashboard:
    tasks_service: TaskService
    categories_service: CategoryService
    stats_service: StatsService
    notifier: Notifier
    default_category: str = "personal"
    default_priority: str = "medium"

    tasks: list[Task] = field(default_factory=list)
    category_id: int | None = None
    search_query: str = ""
    search_results: list[Task] = field(default_factory=list)
    filters: TaskFilters = NO_FILTERS
    selected: set[int] = field(default_factory=set)
    last_error: str | None = None

    def _fail(self, toast: str, err: Exception) -> None:
        self.last_error = friendly_record_error_message(err)
        logger.info("%s: %s", toast, self.last_error)
        self.notifier.error(toast)

    # ---- loading / search ----

    def open_category(self, category_id: int | None) -> list[Task]:
        self.category_id = category_id
        self.selected.clear()
        return self.load_tasks()

    def load_tasks(self) -> list[Task]:
        self.last_error = None
        try:
            if self.category_id is not None:
                self.tasks = self.tasks_service.get_by_category(self.category_id)
            else:
                self.tasks = self.tasks_service.get_all()
        except RecordApiError as e:
            self._fail("Failed to load tasks", e)
            self.tasks = []
        self._refresh_search()
        return self.tasks

    def search(self, query: str) -> list[Task]:
        self.search_query = (query or "").strip()
        self._refresh_search()
        return self.display_tasks()

    def _refresh_search(self) -> None:
        if not self.search_query:
            self.search_results = []
            return
        try:
            results = self.tasks_service.search(self.search_query)
        except RecordApiError as e:
            self._fail("Search failed", e)
            self.search_results = list(self.tasks)
            return
        if self.category_id is not None:
            results = [t for t in results if t.category_id == self.category_id]
        self.search_results = results

    def display_tasks(self) -> list[Task]:
        return list(self.search_results) if self.search_query else list(self.tasks)

    def visible_tasks(self, today: date | None = None) -> list[Task]:
        return filter_tasks(self.display_tasks(), self.filters, today=today)

    # ---- filters ----

    def set_filters(self, filters: TaskFilters | None = None, **changes: Any) -> TaskFilters:
        base = filters if filters is not None else self.filters
        self.filters = base.with_changes(**changes) if changes else base
        return self.filters

    def clear_filters(self) -> TaskFilters:
        self.filters = NO_FILTERS
        return self.filters

    # ---- task mutations ----

    def _replace_local(self, task: Task) -> None:
        self.tasks = [task if t.id == task.id else t for t in self.tasks]
        self.search_results = [task if t.id == task.id else t for t in self.search_results]

    def _drop_local(self, ids: Iterable[int]) -> None:
        gone = set(ids)
        self.tasks = [t for t in self.tasks if t.id not in gone]
        self.search_results = [t for t in self.search_results if t.id not in gone]
        self.selected -= gone

    def _resolve_default_category(self) -> int | None:
        if self.category_id is not None:
            return self.category_id
        try:
            category = self.categories_service.find(self.default_category)
        except RecordApiError:
            logger.debug("Default category lookup failed", exc_info=True)
            return None
        return category.id if category else None

    def add_task(
        self,
        title: str,
        *,
        description: str = "",
        category_id: int | None = None,
        priority: Priority | str | None = None,
        due_date: date | str | None = None,
    ) -> Task | None:
        if not title or not title.strip():
            self.notifier.error("Please enter a task title")
            return None

        if category_id is None:
            category_id = self._resolve_default_category()

        try:
            task = self.tasks_service.create(
                title=title,
                description=description,
                category_id=category_id,
                priority=priority or self.default_priority,
                due_date=due_date,
            )
        except RecordApiError as e:
            self._fail("Failed to create task", e)
            return None

        self.notifier.success("Task created successfully!")
        # Reload so the list matches the backend order.
        self.load_tasks()
        return task

    def edit_task(self, task_id: int, **changes: Any) -> Task | None:
        try:
            task = self.tasks_service.update(task_id, **changes)
        except ValueError as e:
            self.notifier.error(str(e))
            return None
        except RecordApiError as e:
            self._fail("Failed to update task", e)
            return None
        self._replace_local(task)
        self.notifier.success("Task updated")
        return task

    def toggle_task(self, task_id: int) -> Task | None:
        try:
            task = self.tasks_service.toggle_complete(task_id)
        except RecordApiError as e:
            self._fail("Failed to update task", e)
            return None
        self._replace_local(task)
        if task.completed:
            self.notifier.success("Task completed!")
        else:
            self.notifier.info("Task marked as incomplete")
        return task

    def delete_task(self, task_id: int) -> bool:
        try:
            self.tasks_service.delete(task_id)
        except RecordApiError as e:
            self._fail("Failed to delete task", e)
            return False
        self._drop_local([task_id])
        self.notifier.success("Task deleted")
        return True

    def bulk_delete(self, task_ids: Iterable[int]) -> list[int]:
        ids = [int(i) for i in task_ids]
        if not ids:
            return []
        try:
            deleted = self.tasks_service.bulk_delete(ids)
        except RecordApiError as e:
            self._fail("Failed to delete tasks", e)
            return []
        self._drop_local(deleted)
        n = len(deleted)
        self.notifier.success(f"Deleted {n} task{'' if n == 1 else 's'}")
        return deleted

    # ---- selection ----

    def toggle_select(self, task_id: int) -> set[int]:
        if task_id in self.selected:
            self.selected.discard(task_id)
        else:
            self.selected.add(task_id)
        return self.selected

    def select_all(self, today: date | None = None) -> set[int]:
        """Select every visible task, or clear the selection if it already covers them."""
        visible = {t.id for t in self.visible_tasks(today)}
        if visible and self.selected == visible:
            self.selected = set()
        else:
            self.selected = visible
        return self.selected

    def delete_selected(self) -> list[int]:
        deleted = self.bulk_delete(sorted(self.selected))
        self.selected.clear()
        return deleted

    # ---- stats / sidebar ----

    def load_stats(self, today: date | None = None) -> StatsSnapshot | None:
        try:
            return StatsSnapshot(
                user=self.stats_service.get_user_stats(today),
                weekly=self.stats_service.get_weekly_progress(today),
            )
        except RecordApiError as e:
            self._fail("Failed to load progress data", e)
            return None

    def load_sidebar(self, today: date | None = None) -> SidebarSnapshot | None:
        try:
            tasks = self.tasks_service.get_all()
            categories = self.categories_service.sync_task_counts(tasks)
        except RecordApiError as e:
            self._fail("Failed to load sidebar data", e)
            return None
        return SidebarSnapshot(categories=categories, stats=compute_user_stats(tasks, today))

    # ---- categories ----

    def find_category(self, ref: str) -> Category | None:
        """Category by id or name; None when missing or when the lookup fails (see last_error)."""
        self.last_error = None
        try:
            return self.categories_service.find(ref)
        except RecordApiError as e:
            self._fail("Failed to load categories", e)
            return None

    def list_categories(self) -> list[Category]:
        try:
            return self.categories_service.get_all()
        except RecordApiError as e:
            self._fail("Failed to load categories", e)
            return []

    def add_category(self, name: str, *, color: str | None = None, icon: str | None = None) -> Category | None:
        try:
            category = self.categories_service.create(name=name, color=color, icon=icon)
        except RecordApiError as e:
            self._fail("Failed to create category", e)
            return None
        self.notifier.success(f"Category '{category.name}' created")
        return category

    def edit_category(self, category_id: int, **changes: Any) -> Category | None:
        try:
            category = self.categories_service.update(category_id, **changes)
        except ValueError as e:
            self.notifier.error(str(e))
            return None
        except RecordApiError as e:
            self._fail("Failed to update category", e)
            return None
        self.notifier.success("Category updated")
        return category

    def delete_category(self, category_id: int) -> bool:
        try:
            self.categories_service.delete(category_id)
        except RecordApiError as e:
            self._fail("Failed to delete category", e)
            return False
        if self.category_id == category_id:
            self.open_category(None)
        self.notifier.success("Category deleted")
        return True
