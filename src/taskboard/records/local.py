# src/taskboard/records/local.py

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import threading
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from .errors import RecordApiError, RecordNotFoundError
from .query import Condition, OrderBy, matches_all, project, sort_records

logger = logging.getLogger(__name__)


def demo_records(today: date | None = None) -> dict[str, list[dict[str, Any]]]:
    """Starter categories and a few tasks so an offline dashboard is not empty."""
    if today is None:
        today = date.today()

    def day(offset: int) -> str:
        return (today + timedelta(days=offset)).isoformat()

    def ts(offset: int) -> str:
        return f"{day(offset)}T09:00:00"

    categories = [
        {"Id": 1, "name": "personal", "color": "#6366F1", "icon": "User", "task_count": 0},
        {"Id": 2, "name": "work", "color": "#F59E0B", "icon": "Briefcase", "task_count": 0},
        {"Id": 3, "name": "shopping", "color": "#10B981", "icon": "ShoppingCart", "task_count": 0},
        {"Id": 4, "name": "health", "color": "#EF4444", "icon": "Heart", "task_count": 0},
    ]
    tasks = [
        ("Plan the week", "Review goals and block focus time", 1, "high", day(0), True, ts(-3), ts(0)),
        ("Send project update", "Summary for the team", 2, "high", day(-1), False, ts(-4), ts(-4)),
        ("Review pull requests", "", 2, "medium", day(0), False, ts(-2), ts(-2)),
        ("Prepare slides", "Quarterly review deck", 2, "medium", day(3), True, ts(-5), ts(-1)),
        ("Buy groceries", "Milk, eggs, coffee", 3, "low", day(1), False, ts(-1), ts(-1)),
        ("Morning run", "5 km easy pace", 4, "medium", None, True, ts(-6), ts(-2)),
        ("Book dentist appointment", "", 4, "low", day(7), False, ts(-1), ts(-1)),
    ]
    task_records = [
        {
            "Id": i,
            "title": title,
            "description": desc,
            "category_id": cid,
            "priority": prio,
            "due_date": due,
            "completed": done,
            "created_at": created,
            "updated_at": updated,
        }
        for i, (title, desc, cid, prio, due, done, created, updated) in enumerate(tasks, start=1)
    ]
    return {"category": categories, "task": task_records}


class LocalRecordClient:
    """
    JSON-file record store with the same interface as HttpRecordClient.

    Used for offline runs (no API configured) and tests. The whole file is
    rewritten atomically after every write.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        seed: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._tables: dict[str, dict[str, Any]] = {}

        if self._path.exists():
            self._load()
        elif seed:
            for table, records in seed.items():
                for r in records:
                    self._insert(table, copy.deepcopy(r))
            self._commit({})

        counts = {t: len(v["records"]) for t, v in self._tables.items()}
        logger.info("LocalRecordClient ready path=%s tables=%s", self._path, counts)

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing is kept open)."""
        return

    # ---- persistence ----

    def _quarantine(self) -> None:
        """Move an unreadable store file aside so the next write cannot overwrite it."""
        if not self._path.is_file():
            return
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        aside = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            os.replace(self._path, aside)
        except OSError as e:
            raise RecordApiError(f"Local record store {self._path} is unreadable and could not be moved aside") from e
        logger.warning("Local record store %s was unreadable; moved it to %s and started empty", self._path, aside)

    def _load(self) -> None:
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read local record store %s", self._path)
            self._quarantine()
            return
        if not isinstance(data, dict):
            logger.warning("Local record store %s has an unexpected layout", self._path)
            self._quarantine()
            return

        for table, body in data.items():
            records = body.get("records") if isinstance(body, dict) else None
            if not isinstance(records, list):
                continue
            clean = []
            for r in records:
                try:
                    r["Id"] = int(r["Id"])
                except (TypeError, KeyError, ValueError):
                    logger.warning("Skipping malformed %s record in %s: %r", table, self._path, r)
                    continue
                clean.append(r)
            try:
                stored_next = int(body.get("next_id") or 0)
            except (TypeError, ValueError):
                stored_next = 0
            next_id = max([r["Id"] for r in clean] + [stored_next - 1, 0]) + 1
            self._tables[str(table)] = {"next_id": next_id, "records": clean}

    def _save(self) -> None:
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._tables, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def _commit(self, before: dict[str, dict[str, Any]]) -> None:
        """Persist the current tables, or restore `before` when the file cannot be written."""
        try:
            self._save()
        except OSError as e:
            self._tables = before
            with contextlib.suppress(OSError):
                self._path.with_suffix(".tmp").unlink(missing_ok=True)
            logger.error("Local record store write failed path=%s: %s", self._path, e)
            raise RecordApiError("Local record store write failed") from e

    def _table(self, table: str) -> dict[str, Any]:
        return self._tables.setdefault(table, {"next_id": 1, "records": []})

    def _insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        t = self._table(table)
        rid = record.get("Id")
        if rid is None:
            rid = t["next_id"]
        record["Id"] = int(rid)
        t["next_id"] = max(t["next_id"], record["Id"] + 1)
        t["records"].append(record)
        return record

    def _find(self, table: str, record_id: int) -> dict[str, Any] | None:
        for r in self._table(table)["records"]:
            if int(r["Id"]) == int(record_id):
                return r
        return None

    # ---- public API ----

    def fetch_records(
        self,
        table: str,
        *,
        fields: Sequence[str] | None = None,
        where: Sequence[Condition] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        with self._lock:
            rows = [r for r in self._table(table)["records"] if matches_all(r, where)]
            if order_by:
                rows = sort_records(rows, order_by)
            rows = rows[max(0, int(offset)) :]
            if limit is not None:
                rows = rows[: max(0, int(limit))]
            return [project(copy.deepcopy(r), fields) for r in rows]

    def get_record(
        self,
        table: str,
        record_id: int,
        *,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        with self._lock:
            r = self._find(table, record_id)
            return project(copy.deepcopy(r), fields) if r is not None else None

    def create_records(self, table: str, records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        with self._lock:
            before = copy.deepcopy(self._tables)
            created = []
            for r in records:
                new = copy.deepcopy(dict(r))
                new.pop("Id", None)
                created.append(copy.deepcopy(self._insert(table, new)))
            self._commit(before)
            logger.debug("Local store: created %d %s records", len(created), table)
            return created

    def update_records(self, table: str, records: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        with self._lock:
            targets = []
            for r in records:
                if "Id" not in r:
                    raise ValueError("update_records: every record needs an Id")
                existing = self._find(table, r["Id"])
                if existing is None:
                    raise RecordNotFoundError(f"{table} record not found: {r['Id']}")
                targets.append((existing, r))

            before = copy.deepcopy(self._tables)
            updated = []
            for existing, changes in targets:
                existing.update({k: v for k, v in changes.items() if k != "Id"})
                updated.append(copy.deepcopy(existing))
            self._commit(before)
            return updated

    def delete_records(self, table: str, record_ids: Sequence[int]) -> list[int]:
        with self._lock:
            wanted = {int(i) for i in record_ids}
            t = self._table(table)
            deleted = [int(r["Id"]) for r in t["records"] if int(r["Id"]) in wanted]
            if deleted:
                before = copy.deepcopy(self._tables)
                t["records"] = [r for r in t["records"] if int(r["Id"]) not in wanted]
                self._commit(before)
            # Keep the caller's order, once per id.
            out: list[int] = []
            for i in record_ids:
                if int(i) in deleted and int(i) not in out:
                    out.append(int(i))
            return out
