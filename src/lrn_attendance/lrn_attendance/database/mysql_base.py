from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import SchemaObjectMissing, StorageError, UniqueViolation
from .connection import DatabaseConnection

_MISSING_SCHEMA_ERRNOS = frozenset({errorcode.ER_NO_SUCH_TABLE, errorcode.ER_SP_DOES_NOT_EXIST})


def translate_mysql_error(err: mysql.connector.Error) -> StorageError:
    """Map a connector error onto the storage error taxonomy by errno."""

    errno = getattr(err, "errno", None)
    if errno in _MISSING_SCHEMA_ERRNOS:
        return SchemaObjectMissing(str(err))
    if errno == errorcode.ER_DUP_ENTRY:
        return UniqueViolation(str(err))
    return StorageError(str(err))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise translate_mysql_error(e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise translate_mysql_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
