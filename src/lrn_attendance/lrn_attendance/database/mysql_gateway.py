from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .connection import DatabaseConnection
from .gateway import Filter, Order, Row, StorageGateway, check_columns, entity_spec
from .mysql_base import db_cursor, fetchall, fetchone

_SQL_OPS = {
    "eq": "=",
    "neq": "<>",
    "gte": ">=",
    "gt": ">",
    "lt": "<",
    "lte": "<=",
}

# Server-side functions callers may invoke through ``call``.
ALLOWED_FUNCTIONS = frozenset({"has_scanned_today"})


def build_where(entity: str, filters: Sequence[Filter]) -> tuple[str, list[Any]]:
    """Render filters as a parameterized WHERE clause (empty string when none)."""

    spec = entity_spec(entity)
    check_columns(spec, [f.column for f in filters])

    clauses: list[str] = []
    params: list[Any] = []
    for f in filters:
        col = f"`{f.column}`"
        if f.op == "eq" and f.value is None:
            clauses.append(f"{col} IS NULL")
        elif f.op == "ilike":
            clauses.append(f"LOWER({col}) LIKE %s")
            params.append(f"%{str(f.value).lower()}%")
        elif f.op == "in":
            values = list(f.value)
            if not values:
                clauses.append("1=0")
                continue
            clauses.append(f"{col} IN ({','.join(['%s'] * len(values))})")
            params.extend(values)
        else:
            clauses.append(f"{col} {_SQL_OPS[f.op]} %s")
            params.append(f.value)

    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


class MySQLStorageGateway(StorageGateway):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_one(self, entity: str, filters: Sequence[Filter]) -> Optional[Row]:
        rows = self.query(entity, filters, limit=1)
        return rows[0] if rows else None

    def query(
        self,
        entity: str,
        filters: Sequence[Filter] = (),
        *,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> list[Row]:
        spec = entity_spec(entity)
        where, params = build_where(entity, filters)
        sql = f"SELECT {', '.join(spec.columns)} FROM {spec.table}{where}"
        if order is not None:
            check_columns(spec, [order.column])
            sql += f" ORDER BY `{order.column}` {'DESC' if order.descending else 'ASC'}"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return fetchall(cur)

    def insert(self, entity: str, values: Mapping[str, Any]) -> Row:
        spec = entity_spec(entity)
        check_columns(spec, values.keys())
        cols = list(values.keys())

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {spec.table}({', '.join(cols)}) VALUES({','.join(['%s'] * len(cols))})",
                tuple(values[c] for c in cols),
            )
            new_id = values.get(spec.key) or cur.lastrowid
            cur.execute(
                f"SELECT {', '.join(spec.columns)} FROM {spec.table} WHERE {spec.key}=%s",
                (new_id,),
            )
            return fetchone(cur) or {**values, spec.key: new_id}

    def update(self, entity: str, key: Any, patch: Mapping[str, Any]) -> Optional[Row]:
        spec = entity_spec(entity)
        check_columns(spec, patch.keys())
        if not patch:
            return self.find_one(entity, [Filter(spec.key, "eq", key)])

        assignments = ", ".join(f"`{c}`=%s" for c in patch)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {spec.table} SET {assignments} WHERE {spec.key}=%s",
                (*patch.values(), key),
            )
            cur.execute(
                f"SELECT {', '.join(spec.columns)} FROM {spec.table} WHERE {spec.key}=%s",
                (key,),
            )
            return fetchone(cur)

    def delete(self, entity: str, key: Any) -> bool:
        spec = entity_spec(entity)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {spec.table} WHERE {spec.key}=%s", (key,))
            return cur.rowcount > 0

    def count(self, entity: str, filters: Sequence[Filter] = ()) -> int:
        spec = entity_spec(entity)
        where, params = build_where(entity, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {spec.table}{where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def call(self, function: str, *args: Any) -> Any:
        if function not in ALLOWED_FUNCTIONS:
            raise ValueError(f"Unknown function: {function}")
        placeholders = ",".join(["%s"] * len(args))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {function}({placeholders}) AS result", tuple(args))
            row = fetchone(cur)
            return row["result"] if row else None
