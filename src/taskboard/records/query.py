# src/taskboard/records/query.py

"""Query building blocks shared by the record clients."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Operator(StrEnum):
    EQUAL_TO = "EqualTo"
    NOT_EQUAL_TO = "NotEqualTo"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL_TO = "GreaterThanOrEqualTo"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL_TO = "LessThanOrEqualTo"
    CONTAINS = "Contains"


@dataclass(frozen=True, slots=True)
class Condition:
    field: str
    operator: Operator
    values: tuple[Any, ...]

    @classmethod
    def eq(cls, field: str, value: Any) -> Condition:
        return cls(field, Operator.EQUAL_TO, (value,))

    @classmethod
    def lt(cls, field: str, value: Any) -> Condition:
        return cls(field, Operator.LESS_THAN, (value,))

    @classmethod
    def gt(cls, field: str, value: Any) -> Condition:
        return cls(field, Operator.GREATER_THAN, (value,))

    def to_payload(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator.value, "values": list(self.values)}


@dataclass(frozen=True, slots=True)
class OrderBy:
    field: str
    descending: bool = False

    def to_payload(self) -> dict[str, str]:
        return {"field": self.field, "direction": "DESC" if self.descending else "ASC"}


def _compare(op: Operator, actual: Any, expected: Any) -> bool:
    if op == Operator.EQUAL_TO:
        return actual == expected
    if op == Operator.NOT_EQUAL_TO:
        return actual != expected
    if op == Operator.CONTAINS:
        return actual is not None and str(expected).lower() in str(actual).lower()

    # Range operators never match missing values.
    if actual is None or expected is None:
        return False
    try:
        if op == Operator.GREATER_THAN:
            return actual > expected
        if op == Operator.GREATER_THAN_OR_EQUAL_TO:
            return actual >= expected
        if op == Operator.LESS_THAN:
            return actual < expected
        if op == Operator.LESS_THAN_OR_EQUAL_TO:
            return actual <= expected
    except TypeError:
        return False
    return False


def matches_condition(record: dict[str, Any], cond: Condition) -> bool:
    """A record matches when its field satisfies the operator for any of the values."""
    actual = record.get(cond.field)
    return any(_compare(cond.operator, actual, v) for v in cond.values)


def matches_all(record: dict[str, Any], where: Iterable[Condition]) -> bool:
    return all(matches_condition(record, c) for c in where)


def sort_records(records: list[dict[str, Any]], order_by: Sequence[OrderBy]) -> list[dict[str, Any]]:
    """Stable multi-key sort; missing values sort first ascending (last descending)."""
    out = list(records)
    for ob in reversed(order_by):
        out.sort(
            key=lambda r, f=ob.field: (r.get(f) is not None, r.get(f) if r.get(f) is not None else 0),
            reverse=ob.descending,
        )
    return out


def project(record: dict[str, Any], fields: Sequence[str] | None) -> dict[str, Any]:
    """Keep only requested fields (Id is always kept)."""
    if not fields:
        return dict(record)
    out = {"Id": record.get("Id")}
    for f in fields:
        if f in record:
            out[f] = record[f]
    return out
