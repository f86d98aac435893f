from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.lrn_attendance.lrn_attendance.core.exceptions import SchemaObjectMissing, StorageError, UniqueViolation
from src.lrn_attendance.lrn_attendance.database.gateway import Filter, Order, eq, gte, ilike, in_, lt
from src.lrn_attendance.lrn_attendance.database.mysql_base import translate_mysql_error
from src.lrn_attendance.lrn_attendance.database.mysql_gateway import MySQLStorageGateway, build_where


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = None
        self.rowcount = 0
        self.closed = False

    def execute(self, sql, params=()):
        self._conn.statements.append((sql, params))
        if self._conn.raise_on_execute is not None:
            raise self._conn.raise_on_execute
        self.lastrowid = self._conn.lastrowid
        self.rowcount = self._conn.rowcount

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.statements = []
        self.rows = []
        self.lastrowid = None
        self.rowcount = 0
        self.raise_on_execute = None
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self):
        self.conn = FakeConnection()
        self.connect_error = None

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        return self.conn


@pytest.fixture()
def factory():
    return FakeConnectionFactory()


@pytest.fixture()
def mysql_gateway(factory):
    return MySQLStorageGateway(factory)


def test_build_where_empty():
    assert build_where("students", []) == ("", [])


def test_build_where_operators():
    start, end = datetime(2026, 10, 19), datetime(2026, 10, 20)

    where, params = build_where(
        "attendance",
        [eq("student_id", 7), gte("scan_timestamp", start), lt("scan_timestamp", end), eq("lrn", None)],
    )

    assert where == " WHERE `student_id` = %s AND `scan_timestamp` >= %s AND `scan_timestamp` < %s AND `lrn` IS NULL"
    assert params == [7, start, end]


def test_build_where_ilike_and_in():
    where, params = build_where("students", [ilike("name", "Juan"), in_("id", [1, 2])])

    assert where == " WHERE LOWER(`name`) LIKE %s AND `id` IN (%s,%s)"
    assert params == ["%juan%", 1, 2]


def test_build_where_empty_in_matches_nothing():
    assert build_where("students", [in_("id", [])]) == (" WHERE 1=0", [])


def test_build_where_rejects_unknown_column():
    with pytest.raises(ValueError):
        build_where("students", [eq("password", "x")])


def test_filter_rejects_unknown_operator():
    with pytest.raises(ValueError):
        Filter("name", "regex", ".*")


@pytest.mark.parametrize(
    "errno, expected",
    [
        (errorcode.ER_NO_SUCH_TABLE, SchemaObjectMissing),
        (errorcode.ER_SP_DOES_NOT_EXIST, SchemaObjectMissing),
        (errorcode.ER_DUP_ENTRY, UniqueViolation),
        (errorcode.ER_LOCK_DEADLOCK, StorageError),
    ],
)
def test_translate_mysql_error(errno, expected):
    translated = translate_mysql_error(mysql.connector.Error(msg="boom", errno=errno))

    assert type(translated) is expected


def test_query_renders_order_and_limit(mysql_gateway, factory):
    factory.conn.rows = [{"id": 1, "name": "Juan Dela Cruz"}]

    rows = mysql_gateway.query("students", [eq("grade", "Grade 7")], order=Order("name"), limit=5)

    assert rows == [{"id": 1, "name": "Juan Dela Cruz"}]
    sql, params = factory.conn.statements[0]
    assert sql.startswith("SELECT id, lrn, name, grade, section")
    assert sql.endswith(" FROM students WHERE `grade` = %s ORDER BY `name` ASC LIMIT %s")
    assert params == ("Grade 7", 5)
    assert factory.conn.committed and factory.conn.closed


def test_insert_reselects_new_row(mysql_gateway, factory):
    factory.conn.lastrowid = 42
    factory.conn.rows = [{"id": 42, "lrn": "123456789012"}]

    row = mysql_gateway.insert("students", {"lrn": "123456789012", "name": "Juan"})

    assert row["id"] == 42
    insert_sql, insert_params = factory.conn.statements[0]
    assert insert_sql == "INSERT INTO students(lrn, name) VALUES(%s,%s)"
    assert insert_params == ("123456789012", "Juan")
    assert factory.conn.statements[1][1] == (42,)


def test_insert_duplicate_rolls_back_as_unique_violation(mysql_gateway, factory):
    factory.conn.raise_on_execute = mysql.connector.Error(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    with pytest.raises(UniqueViolation):
        mysql_gateway.insert("attendance", {"student_id": 1, "lrn": "123456789012"})

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_insert_rejects_unknown_column(mysql_gateway, factory):
    with pytest.raises(ValueError):
        mysql_gateway.insert("students", {"password": "x"})
    assert factory.conn.statements == []


def test_update_without_patch_is_a_lookup(mysql_gateway, factory):
    factory.conn.rows = [{"id": 3}]

    assert mysql_gateway.update("students", 3, {}) == {"id": 3}
    assert not factory.conn.statements[0][0].startswith("UPDATE")


def test_delete_reports_rowcount(mysql_gateway, factory):
    factory.conn.rowcount = 1
    assert mysql_gateway.delete("students", 3) is True

    factory.conn.rowcount = 0
    assert mysql_gateway.delete("students", 4) is False


def test_count(mysql_gateway, factory):
    factory.conn.rows = [{"total": 12}]

    assert mysql_gateway.count("students") == 12
    assert factory.conn.statements[0][0] == "SELECT COUNT(*) AS total FROM students"


def test_call_function(mysql_gateway, factory):
    factory.conn.rows = [{"result": 1}]

    assert mysql_gateway.call("has_scanned_today", "123456789012") == 1
    assert factory.conn.statements[0] == ("SELECT has_scanned_today(%s) AS result", ("123456789012",))


def test_call_missing_function(mysql_gateway, factory):
    factory.conn.raise_on_execute = mysql.connector.Error(msg="FUNCTION does not exist", errno=errorcode.ER_SP_DOES_NOT_EXIST)

    with pytest.raises(SchemaObjectMissing):
        mysql_gateway.call("has_scanned_today", "123456789012")


def test_call_rejects_unlisted_function(mysql_gateway, factory):
    with pytest.raises(ValueError):
        mysql_gateway.call("sleep", 10)
    assert factory.conn.statements == []


def test_connect_failure_is_storage_error(mysql_gateway, factory):
    factory.connect_error = mysql.connector.Error(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR)

    with pytest.raises(StorageError):
        mysql_gateway.count("students")
