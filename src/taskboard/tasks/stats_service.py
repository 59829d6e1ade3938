# tasks/stats_service.py

from __future__ import annotations

from datetime import date

from .task_service import TaskService
from .task_stats import (
    CategoryProgress,
    DayActivity,
    UserStats,
    compute_category_stats,
    compute_user_stats,
    compute_weekly_progress,
)


class StatsService:
    """Productivity statistics over a fresh task snapshot."""

    def __init__(self, tasks: TaskService) -> None:
        self._tasks = tasks

    def get_user_stats(self, today: date | None = None) -> UserStats:
        return compute_user_stats(self._tasks.get_all(), today)

    def get_category_stats(self) -> dict[int | None, CategoryProgress]:
        return compute_category_stats(self._tasks.get_all())

    def get_weekly_progress(self, today: date | None = None) -> list[DayActivity]:
        return compute_weekly_progress(self._tasks.get_all(), today)
