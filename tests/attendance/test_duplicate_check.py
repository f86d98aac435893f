from __future__ import annotations

from datetime import timedelta

import pytest

from src.lrn_attendance.lrn_attendance.attendance.duplicate_check import DuplicateScanCheck
from src.lrn_attendance.lrn_attendance.core.exceptions import StorageError


@pytest.fixture()
def check(container, clock):
    return DuplicateScanCheck(container.attendance_repo, container.students_repo, clock=clock)


def _insert_scan(gateway, student, ts):
    gateway.insert(
        "attendance",
        {
            "student_id": student.id,
            "lrn": student.lrn,
            "scan_timestamp": ts,
            "scan_location": "School Gate",
            "status": "Present",
        },
    )


def test_primary_path_false_without_records(check, juan):
    assert check.has_scanned_today(juan.lrn) is False


def test_primary_path_true_after_scan_today(check, gateway, juan, clock):
    _insert_scan(gateway, juan, clock())

    assert check.has_scanned_today(juan.lrn) is True
    assert ("call", "has_scanned_today") in gateway.calls


def test_yesterday_scan_does_not_count(check, gateway, juan, clock):
    _insert_scan(gateway, juan, clock() - timedelta(days=1))

    assert check.has_scanned_today(juan.lrn) is False


def test_missing_function_uses_fallback_lookup(check, gateway, juan, clock):
    _insert_scan(gateway, juan, clock().replace(hour=0, minute=0))
    gateway.missing.add("has_scanned_today")

    assert check.has_scanned_today(juan.lrn) is True
    assert ("query", "attendance") in gateway.calls


def test_fallback_window_excludes_yesterday(check, gateway, juan, clock):
    _insert_scan(gateway, juan, clock().replace(hour=23, minute=59) - timedelta(days=1))
    gateway.missing.add("has_scanned_today")

    assert check.has_scanned_today(juan.lrn) is False


def test_fallback_unknown_student_is_not_scanned(check, gateway):
    gateway.missing.add("has_scanned_today")

    assert check.has_scanned_today("000000000000") is False


def test_fallback_read_error_fails_open(check, gateway, juan, clock):
    _insert_scan(gateway, juan, clock())
    gateway.missing.add("has_scanned_today")
    gateway.failures[("query", "attendance")] = StorageError("timeout")

    assert check.has_scanned_today(juan.lrn) is False


def test_other_primary_errors_propagate(check, gateway, juan):
    gateway.failures[("call", "has_scanned_today")] = StorageError("deadlock")

    with pytest.raises(StorageError):
        check.has_scanned_today(juan.lrn)
