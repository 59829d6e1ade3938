# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the record backend (remote API / local file) and the
notification surface swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from ..records.query import Condition, OrderBy

Record = dict[str, Any]
# Raw record as exchanged with the backend: {"Id": 1, "title": "...", ...}.


class RecordClient(Protocol):
    """CRUD over named record tables with projections, conditions and paging."""

    def fetch_records(
            self,
            table: str,
            *,
            fields: Sequence[str] | None = None,
            where: Sequence[Condition] = (),
            order_by: Sequence[OrderBy] = (),
            limit: int | None = None,
            offset: int = 0,
    ) -> list[Record]: ...

    def get_record(
            self,
            table: str,
            record_id: int,
            *,
            fields: Sequence[str] | None = None,
    ) -> Record | None: ...

    def create_records(self, table: str, records: Sequence[Record]) -> list[Record]: ...
    def update_records(self, table: str, records: Sequence[Record]) -> list[Record]: ...
    def delete_records(self, table: str, record_ids: Sequence[int]) -> list[int]: ...
    def close(self) -> None: ...


class Notifier(Protocol):
    """
    Transient user notifications (the dashboard's "toasts").

    Implementations must not raise: a failed notification is never worth
    failing the operation that triggered it.
    """

    def success(self, text: str) -> None: ...
    def info(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...
