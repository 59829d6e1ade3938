# tasks/task_stats.py

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from datetime import date, timedelta

from .task_models import Task

STREAK_WINDOW_DAYS = 30
WEEK_DAYS = 7

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True, slots=True)
class UserStats:
    total_tasks: int
    completed_tasks: int
    streak: int
    today_completed: int
    completion_rate: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DayActivity:
    date: str  # YYYY-MM-DD
    completed: int
    day: str  # Mon..Sun


@dataclass(frozen=True, slots=True)
class CategoryProgress:
    total: int = 0
    completed: int = 0


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, halves rounded up; 0 for an empty list."""
    if total <= 0:
        return 0
    # Integer form of floor(100 * completed / total + 0.5).
    return (200 * completed + total) // (2 * total)


def completions_by_day(tasks: Iterable[Task]) -> Counter[date]:
    """How many completed tasks were last updated on each calendar day."""
    counts: Counter[date] = Counter()
    for t in tasks:
        day = t.completed_on()
        if day is not None:
            counts[day] += 1
    return counts


def compute_streak(
    tasks: Iterable[Task],
    today: date,
    *,
    window_days: int = STREAK_WINDOW_DAYS,
) -> int:
    """
    Consecutive days (counting back from today) with at least one completion.

    A gap on today itself does not end the streak: the user still has the
    rest of the day to complete something.
    """
    days = completions_by_day(tasks)
    streak = 0
    for i in range(window_days):
        if days.get(today - timedelta(days=i), 0) > 0:
            streak += 1
        elif i > 0:
            break
    return streak


def compute_user_stats(tasks: Sequence[Task], today: date | None = None) -> UserStats:
    if today is None:
        today = date.today()

    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    today_completed = completions_by_day(tasks).get(today, 0)

    return UserStats(
        total_tasks=total,
        completed_tasks=completed,
        streak=compute_streak(tasks, today),
        today_completed=today_completed,
        completion_rate=completion_rate(completed, total),
    )


def compute_weekly_progress(
    tasks: Iterable[Task],
    today: date | None = None,
    *,
    days: int = WEEK_DAYS,
) -> list[DayActivity]:
    """Completions per day for the last `days` days, oldest first, ending today."""
    if today is None:
        today = date.today()

    counts = completions_by_day(tasks)
    out: list[DayActivity] = []
    for i in range(days - 1, -1, -1):
        d = today - timedelta(days=i)
        out.append(DayActivity(date=d.isoformat(), completed=counts.get(d, 0), day=_WEEKDAYS[d.weekday()]))
    return out


def compute_category_stats(tasks: Iterable[Task]) -> dict[int | None, CategoryProgress]:
    totals: Counter[int | None] = Counter()
    done: Counter[int | None] = Counter()
    for t in tasks:
        totals[t.category_id] += 1
        if t.completed:
            done[t.category_id] += 1
    return {cid: CategoryProgress(total=n, completed=done.get(cid, 0)) for cid, n in totals.items()}
