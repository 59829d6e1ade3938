# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.category_service import CategoryService
from ..tasks.stats_service import StatsService
from ..tasks.task_service import TaskService
from .dashboard import Dashboard
from .ports import Notifier, RecordClient


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    records: RecordClient
    notifier: Notifier
    tasks: TaskService
    categories: CategoryService
    stats: StatsService
    dashboard: Dashboard

    offline: bool = False

    @classmethod
    def build(cls, *, settings: Any, records: RecordClient, notifier: Notifier, offline: bool = False) -> AppState:
        """Wire services and the dashboard around one record client."""
        tasks = TaskService(records)
        categories = CategoryService(records)
        stats = StatsService(tasks)
        dashboard = Dashboard(
            tasks_service=tasks,
            categories_service=categories,
            stats_service=stats,
            notifier=notifier,
            default_category=str(getattr(settings, "default_category", "personal") or ""),
            default_priority=str(getattr(settings, "default_priority", "medium") or "medium"),
        )
        return cls(
            settings=settings,
            records=records,
            notifier=notifier,
            tasks=tasks,
            categories=categories,
            stats=stats,
            dashboard=dashboard,
            offline=offline,
        )
