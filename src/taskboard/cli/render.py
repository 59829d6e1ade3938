# src/taskboard/cli/render.py

"""Plain-text rendering of dashboard pieces for the console."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

from ..core.dashboard import SidebarSnapshot, StatsSnapshot
from ..tasks.task_filters import TaskFilters, due_badge, has_active_filters
from ..tasks.task_models import Category, Task
from ..tasks.task_stats import CategoryProgress, DayActivity, UserStats

# Weekly bars are full at this many completions per day.
WEEKLY_BAR_FULL = 5
WEEKLY_BAR_WIDTH = 20


def render_task(
    task: Task,
    *,
    selected: bool = False,
    category_names: Mapping[int, str] | None = None,
    today: date | None = None,
) -> str:
    box = "[x]" if task.completed else "[ ]"
    mark = "*" if selected else " "
    parts = [f"{mark}{task.id:>4} {box} {task.title}", f"({task.priority.value})"]

    badge = due_badge(task, today)
    if badge:
        parts.append(f"<{badge}>")

    if category_names and task.category_id in category_names:
        parts.append(f"#{category_names[task.category_id]}")

    line = " ".join(parts)
    if task.description:
        line += f"\n           {task.description}"
    return line


def render_task_list(
    tasks: list[Task],
    *,
    total_loaded: int,
    selected: Iterable[int] = (),
    filters: TaskFilters | None = None,
    category_names: Mapping[int, str] | None = None,
    today: date | None = None,
) -> str:
    if total_loaded == 0:
        return "No tasks yet. Get started by creating your first task: /add <title>"
    if not tasks:
        return "No tasks match your filters. Try /clear or create a new task."

    sel = set(selected)
    lines = [
        render_task(t, selected=t.id in sel, category_names=category_names, today=today)
        for t in tasks
    ]
    if sel:
        n = len(sel)
        lines.append(f"{n} task{'' if n == 1 else 's'} selected (/rmsel to delete them)")
    if filters is not None and has_active_filters(filters):
        lines.append(f"Filters: {render_filters(filters)}")
    return "\n".join(lines)


def render_filters(filters: TaskFilters) -> str:
    return f"priority={filters.priority} due={filters.due_date} status={filters.status}"


def render_user_stats(stats: UserStats) -> str:
    return (
        f"  Total tasks:     {stats.total_tasks}\n"
        f"  Completed:       {stats.completed_tasks}\n"
        f"  Completed today: {stats.today_completed}\n"
        f"  Current streak:  {stats.streak} day{'' if stats.streak == 1 else 's'}\n"
        f"  Completion rate: {stats.completion_rate}%"
    )


def render_weekly(weekly: list[DayActivity]) -> str:
    lines = []
    for d in weekly:
        filled = min(d.completed, WEEKLY_BAR_FULL) * WEEKLY_BAR_WIDTH // WEEKLY_BAR_FULL
        bar = "#" * filled + "." * (WEEKLY_BAR_WIDTH - filled)
        lines.append(f"  {d.day} {d.date} {bar} {d.completed}")
    return "\n".join(lines)


def render_stats(snapshot: StatsSnapshot) -> str:
    u = snapshot.user
    return (
        "Progress:\n"
        f"{render_user_stats(u)}\n"
        f"  {u.completed_tasks} out of {u.total_tasks} tasks completed\n"
        "Weekly activity:\n"
        f"{render_weekly(snapshot.weekly)}"
    )


def render_categories(
    categories: list[Category],
    *,
    active_id: int | None = None,
    progress: Mapping[int | None, CategoryProgress] | None = None,
) -> str:
    if not categories:
        return "No categories. Create one with /cat add <name>."
    lines = ["Categories:"]
    lines.append(f"  {'>' if active_id is None else ' '}   - all")
    for c in categories:
        arrow = ">" if c.id == active_id else " "
        extra = ""
        if progress is not None and c.id in progress:
            p = progress[c.id]
            extra = f" ({p.completed}/{p.total} done)"
        lines.append(f"  {arrow}{c.id:>4} {c.name} [{c.task_count}]{extra}")
    return "\n".join(lines)


def render_sidebar(snapshot: SidebarSnapshot, *, active_id: int | None = None) -> str:
    return f"{render_categories(snapshot.categories, active_id=active_id)}\nQuick stats:\n{render_user_stats(snapshot.stats)}"
