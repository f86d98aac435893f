"""Generic storage gateway contract.

Services and repositories talk to storage only through this interface:
filtered lookups/queries plus single-row writes keyed by primary key.
Implementations must raise ``SchemaObjectMissing`` when a table or
function is absent and ``UniqueViolation`` on unique-key collisions, so
callers can branch on those instead of on driver messages.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

Row = dict

OPERATORS = ("eq", "neq", "gte", "gt", "lt", "lte", "ilike", "in")


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def ilike(column: str, value: str) -> Filter:
    """Case-insensitive substring match."""
    return Filter(column, "ilike", value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, "in", tuple(values))


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class EntitySpec:
    table: str
    columns: tuple[str, ...]
    key: str = "id"


ENTITIES: Mapping[str, EntitySpec] = {
    "students": EntitySpec(
        table="students",
        columns=(
            "id",
            "lrn",
            "name",
            "grade",
            "section",
            "parent_phone",
            "student_phone",
            "created_at",
            "updated_at",
        ),
    ),
    "attendance": EntitySpec(
        table="attendance",
        columns=(
            "id",
            "student_id",
            "lrn",
            "scan_timestamp",
            "scan_location",
            "status",
            "created_at",
        ),
    ),
    "sms_logs": EntitySpec(
        table="sms_logs",
        columns=(
            "id",
            "student_id",
            "phone_number",
            "message",
            "status",
            "provider",
            "message_id",
            "error_message",
            "sent_at",
            "created_at",
        ),
    ),
}


def entity_spec(entity: str) -> EntitySpec:
    try:
        return ENTITIES[entity]
    except KeyError:
        raise ValueError(f"Unknown entity: {entity}") from None


def check_columns(spec: EntitySpec, columns) -> None:
    unknown = [c for c in columns if c not in spec.columns]
    if unknown:
        raise ValueError(f"Unknown column(s) for {spec.table}: {', '.join(unknown)}")


class StorageGateway(Protocol):
    def find_one(self, entity: str, filters: Sequence[Filter]) -> Optional[Row]:
        raise NotImplementedError

    def query(
        self,
        entity: str,
        filters: Sequence[Filter] = (),
        *,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> list[Row]:
        raise NotImplementedError

    def insert(self, entity: str, values: Mapping[str, Any]) -> Row:
        raise NotImplementedError

    def update(self, entity: str, key: Any, patch: Mapping[str, Any]) -> Optional[Row]:
        raise NotImplementedError

    def delete(self, entity: str, key: Any) -> bool:
        raise NotImplementedError

    def count(self, entity: str, filters: Sequence[Filter] = ()) -> int:
        raise NotImplementedError

    def call(self, function: str, *args: Any) -> Any:
        """Invoke a server-side scalar function and return its value."""

        raise NotImplementedError
