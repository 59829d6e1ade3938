# tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

TASK_TABLE = "task"
CATEGORY_TABLE = "category"

# Field projections requested from the record API.
TASK_FIELDS = [
    "Id",
    "title",
    "description",
    "category_id",
    "priority",
    "due_date",
    "completed",
    "created_at",
    "updated_at",
]
CATEGORY_FIELDS = ["Id", "name", "color", "icon", "task_count"]

DEFAULT_CATEGORY_COLOR = "#6366F1"
DEFAULT_CATEGORY_ICON = "Folder"

ALL = "all"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: Any) -> Priority:
        if isinstance(raw, Priority):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.MEDIUM


class DueBucket(StrEnum):
    ALL = "all"
    TODAY = "today"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"


class StatusFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


# ---- date helpers ----


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_day(ts: datetime) -> date:
    """Calendar day of a timestamp in local time (naive timestamps are taken as local)."""
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone().date()


def parse_date(raw: Any) -> date | None:
    """
    Parse a due date.

    Accepts date/datetime objects, "YYYY-MM-DD" and full ISO-8601 timestamps.
    Malformed input yields None.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return local_day(raw)
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    try:
        if len(s) == 10:
            return date.fromisoformat(s)
        return local_day(datetime.fromisoformat(s.replace("Z", "+00:00")))
    except ValueError:
        logger.debug("Ignoring malformed date: %r", raw)
        return None


def parse_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring malformed timestamp: %r", raw)
        return None


def _parse_id(raw: Any) -> int | None:
    if raw is None or raw == "" or raw == ALL:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "y", "on"}
    return bool(raw)


# ---- records ----


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    category_id: int | None
    priority: Priority
    due_date: date | None
    completed: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Task:
        return cls(
            id=int(record["Id"]),
            title=str(record.get("title") or ""),
            description=str(record.get("description") or ""),
            category_id=_parse_id(record.get("category_id")),
            priority=Priority.from_raw(record.get("priority")),
            due_date=parse_date(record.get("due_date")),
            completed=_parse_bool(record.get("completed")),
            created_at=parse_timestamp(record.get("created_at")),
            updated_at=parse_timestamp(record.get("updated_at")),
        )

    def completed_on(self) -> date | None:
        """Day the task counts as completed on (its last update), or None if still pending."""
        if not self.completed or self.updated_at is None:
            return None
        return local_day(self.updated_at)


@dataclass(slots=True)
class Category:
    id: int
    name: str
    color: str = DEFAULT_CATEGORY_COLOR
    icon: str = DEFAULT_CATEGORY_ICON
    task_count: int = 0

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Category:
        try:
            count = int(record.get("task_count") or 0)
        except (TypeError, ValueError):
            count = 0
        return cls(
            id=int(record["Id"]),
            name=str(record.get("name") or ""),
            color=str(record.get("color") or DEFAULT_CATEGORY_COLOR),
            icon=str(record.get("icon") or DEFAULT_CATEGORY_ICON),
            task_count=count,
        )


def task_fields_to_record(**fields: Any) -> dict[str, Any]:
    """
    Encode task fields for the record API.

    Only the given fields are encoded, so this serves both create and partial update.
    """
    out: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "priority":
            out[name] = Priority.from_raw(value).value
        elif name == "due_date":
            d = parse_date(value)
            out[name] = d.isoformat() if d else None
        elif name in ("created_at", "updated_at"):
            out[name] = value.isoformat() if isinstance(value, datetime) else value
        elif name == "completed":
            out[name] = bool(value)
        elif name == "category_id":
            out[name] = _parse_id(value)
        elif name in ("title", "description"):
            out[name] = str(value or "").strip()
        else:
            raise ValueError(f"unknown task field: {name}")
    return out
