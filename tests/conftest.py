from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

import pytest

from src.lrn_attendance.lrn_attendance.container import build_container
from src.lrn_attendance.lrn_attendance.core.exceptions import SchemaObjectMissing, StorageError, UniqueViolation
from src.lrn_attendance.lrn_attendance.database.gateway import ENTITIES, Filter, Order, entity_spec
from src.lrn_attendance.lrn_attendance.notifications.transports.mock_transport import MockTransport


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def _matches(row: dict, f: Filter) -> bool:
    value = row.get(f.column)
    if f.op == "eq":
        return value == f.value
    if f.op == "neq":
        return value != f.value
    if f.op == "in":
        return value in f.value
    if f.op == "ilike":
        return value is not None and str(f.value).lower() in str(value).lower()
    if value is None:
        return False
    return {
        "gte": value >= f.value,
        "gt": value > f.value,
        "lt": value < f.value,
        "lte": value <= f.value,
    }[f.op]


class InMemoryGateway:
    """StorageGateway fake with the schema's unique keys, cascades and function."""

    def __init__(self, clock: Clock):
        self._clock = clock
        self.tables: dict[str, dict[int, dict]] = {name: {} for name in ENTITIES}
        self._ids = {name: itertools.count(1) for name in ENTITIES}
        self.missing: set[str] = set()
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str]] = []

    # -- helpers -----------------------------------------------------------
    def _enter(self, op: str, name: str) -> None:
        self.calls.append((op, name))
        if name in self.missing:
            raise SchemaObjectMissing(f"relation {name} does not exist")
        failure = self.failures.get((op, name))
        if failure is not None:
            raise failure

    def _check_unique(self, entity: str, row: dict, ignore_id: Optional[int] = None) -> None:
        for other in self.tables[entity].values():
            if other["id"] == ignore_id:
                continue
            if entity == "students" and other["lrn"] == row["lrn"]:
                raise UniqueViolation("Duplicate entry for key 'uq_students_lrn'")
            if (
                entity == "attendance"
                and other["student_id"] == row["student_id"]
                and other["scan_timestamp"].date() == row["scan_timestamp"].date()
            ):
                raise UniqueViolation("Duplicate entry for key 'uq_attendance_student_day'")

    # -- StorageGateway ----------------------------------------------------
    def find_one(self, entity: str, filters: Sequence[Filter]) -> Optional[dict]:
        rows = self.query(entity, filters, limit=1)
        return rows[0] if rows else None

    def query(
        self,
        entity: str,
        filters: Sequence[Filter] = (),
        *,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        self._enter("query", entity)
        rows = [dict(r) for r in self.tables[entity].values() if all(_matches(r, f) for f in filters)]
        if order is not None:
            rows.sort(key=lambda r: r[order.column], reverse=order.descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def insert(self, entity: str, values: Mapping[str, Any]) -> dict:
        self._enter("insert", entity)
        spec = entity_spec(entity)
        row = {c: None for c in spec.columns}
        row.update(values)
        if entity in ("attendance", "sms_logs") and row["student_id"] not in self.tables["students"]:
            raise StorageError("Cannot add or update a child row: a foreign key constraint fails")
        self._check_unique(entity, row)
        row["id"] = next(self._ids[entity])
        row["created_at"] = self._clock()
        if "updated_at" in row:
            row["updated_at"] = self._clock()
        self.tables[entity][row["id"]] = row
        return dict(row)

    def update(self, entity: str, key: Any, patch: Mapping[str, Any]) -> Optional[dict]:
        self._enter("update", entity)
        current = self.tables[entity].get(int(key))
        if current is None:
            return None
        candidate = {**current, **patch}
        self._check_unique(entity, candidate, ignore_id=current["id"])
        self.tables[entity][current["id"]] = candidate
        return dict(candidate)

    def delete(self, entity: str, key: Any) -> bool:
        self._enter("delete", entity)
        removed = self.tables[entity].pop(int(key), None)
        if removed is None:
            return False
        if entity == "students":
            for child in ("attendance", "sms_logs"):
                self.tables[child] = {
                    k: v for k, v in self.tables[child].items() if v["student_id"] != removed["id"]
                }
        return True

    def count(self, entity: str, filters: Sequence[Filter] = ()) -> int:
        return len(self.query(entity, filters))

    def call(self, function: str, *args: Any) -> Any:
        self._enter("call", function)
        if "attendance" in self.missing:
            raise SchemaObjectMissing("relation attendance does not exist")
        if function != "has_scanned_today":
            raise StorageError(f"FUNCTION {function} does not exist")
        (lrn,) = args
        today = self._clock().date()
        return any(
            r["lrn"] == lrn and r["scan_timestamp"].date() == today for r in self.tables["attendance"].values()
        )


@pytest.fixture()
def fixed_now() -> datetime:
    return datetime(2026, 10, 19, 7, 45, 0)


@pytest.fixture()
def clock(fixed_now) -> Clock:
    return Clock(fixed_now)


@pytest.fixture()
def gateway(clock) -> InMemoryGateway:
    return InMemoryGateway(clock)


@pytest.fixture()
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture()
def container(gateway, clock, transport):
    c = build_container(gateway=gateway, sms_config={"provider": "mock"}, notify_async=False, clock=clock)
    c.notification_settings.use_transport(transport)
    return c


@pytest.fixture()
def juan(container):
    return container.student_service.register(
        {
            "lrn": "123456789012",
            "name": "Juan Dela Cruz",
            "grade": "Grade 7",
            "section": "A",
            "parent_phone": "+639171234567",
        }
    )
