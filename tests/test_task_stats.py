# tests/test_task_stats.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from taskboard.tasks.task_models import Task
from taskboard.tasks.task_stats import (
    STREAK_WINDOW_DAYS,
    CategoryProgress,
    completion_rate,
    compute_category_stats,
    compute_streak,
    compute_user_stats,
    compute_weekly_progress,
)

from .fakes import make_task

TODAY = date(2026, 10, 19)  # a Monday


def _done_on(task_id: int, days_ago: int, **kw) -> Task:
    return make_task(task_id, completed=True, updated_on=TODAY - timedelta(days=days_ago), **kw)


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [(0, 0, 0), (0, 5, 0), (5, 5, 100), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (1, 201, 0)],
)
def test_completion_rate(completed: int, total: int, expected: int) -> None:
    assert completion_rate(completed, total) == expected


def test_streak_counts_consecutive_days_back_from_today() -> None:
    tasks = [_done_on(1, 0), _done_on(2, 1), _done_on(3, 2), _done_on(4, 4)]
    assert compute_streak(tasks, TODAY) == 3


def test_streak_tolerates_no_completion_today() -> None:
    tasks = [_done_on(1, 1), _done_on(2, 2)]
    assert compute_streak(tasks, TODAY) == 2


def test_streak_stops_at_first_gap_after_today() -> None:
    tasks = [_done_on(1, 0), _done_on(2, 2)]
    assert compute_streak(tasks, TODAY) == 1


def test_streak_ignores_pending_tasks() -> None:
    pending = make_task(1, completed=False, updated_on=TODAY)
    assert compute_streak([pending], TODAY) == 0


def test_streak_never_exceeds_window() -> None:
    tasks = [_done_on(i, i) for i in range(60)]
    assert compute_streak(tasks, TODAY) == STREAK_WINDOW_DAYS == 30


def test_user_stats() -> None:
    tasks = [
        _done_on(1, 0),
        _done_on(2, 0),
        _done_on(3, 1),
        make_task(4),
        make_task(5, completed=True),  # no timestamp: counts as completed, not for days
    ]
    stats = compute_user_stats(tasks, TODAY)
    assert stats.total_tasks == 5
    assert stats.completed_tasks == 4
    assert stats.today_completed == 2
    assert stats.streak == 2
    assert stats.completion_rate == 80
    assert stats.as_dict()["completion_rate"] == 80


def test_user_stats_empty() -> None:
    stats = compute_user_stats([], TODAY)
    assert (stats.total_tasks, stats.completed_tasks, stats.streak, stats.completion_rate) == (0, 0, 0, 0)


def test_aware_timestamps_use_the_local_calendar_day() -> None:
    local_noon = datetime(2026, 10, 19, 12, 0).astimezone()
    task = make_task(1, completed=True)
    task.updated_at = local_noon.astimezone(timezone.utc)
    assert compute_user_stats([task], TODAY).today_completed == 1


def test_weekly_progress_is_seven_days_oldest_first() -> None:
    tasks = [_done_on(1, 0), _done_on(2, 0), _done_on(3, 6), _done_on(4, 7)]
    week = compute_weekly_progress(tasks, TODAY)

    assert [d.date for d in week] == [(TODAY - timedelta(days=i)).isoformat() for i in range(6, -1, -1)]
    assert [d.completed for d in week] == [1, 0, 0, 0, 0, 0, 2]
    assert week[-1].day == "Mon"
    assert week[0].day == "Tue"


def test_category_stats() -> None:
    tasks = [
        make_task(1, category_id=1, completed=True),
        make_task(2, category_id=1),
        make_task(3, category_id=2),
        make_task(4, category_id=None, completed=True),
    ]
    assert compute_category_stats(tasks) == {
        1: CategoryProgress(total=2, completed=1),
        2: CategoryProgress(total=1, completed=0),
        None: CategoryProgress(total=1, completed=1),
    }
