from __future__ import annotations

from datetime import datetime

import pytest

from src.lrn_attendance.lrn_attendance.attendance.model import AttendanceRecord
from src.lrn_attendance.lrn_attendance.core.enums import DeliveryStatus
from src.lrn_attendance.lrn_attendance.core.exceptions import StorageError
from src.lrn_attendance.lrn_attendance.notifications.dispatcher import (
    SMS_DISABLED_ERROR,
    build_channels,
    render_message,
)
from src.lrn_attendance.lrn_attendance.notifications.model import Channel
from src.lrn_attendance.lrn_attendance.students.model import Student


def _student(parent="+639171234567", own=None, id=1):
    return Student(
        id=id,
        lrn="123456789012",
        name="Juan Dela Cruz",
        grade="Grade 7",
        section="A",
        parent_phone=parent,
        student_phone=own,
    )


def _record(student, ts=datetime(2026, 10, 18, 7, 45)):
    return AttendanceRecord(
        id=10,
        student_id=student.id,
        lrn=student.lrn,
        scan_timestamp=ts,
        scan_location="School Gate",
        status="Present",
    )


def test_channels_guardian_only():
    assert [c.recipient for c in build_channels(_student())] == ["guardian"]


def test_channels_guardian_then_student():
    channels = build_channels(_student(own="+639179999999"))

    assert [(c.recipient, c.phone) for c in channels] == [
        ("guardian", "+639171234567"),
        ("student", "+639179999999"),
    ]


def test_channels_same_number_once():
    assert len(build_channels(_student(own="+639171234567"))) == 1


def test_channels_student_phone_without_guardian():
    assert [c.recipient for c in build_channels(_student(parent=None, own="+639179999999"))] == ["student"]


def test_no_phones_no_channels():
    assert build_channels(_student(parent=None)) == []


def test_guardian_message_names_student_place_and_time():
    student = _student()
    body = render_message(Channel(phone="+639171234567", recipient="guardian"), student, _record(student))

    assert "Juan Dela Cruz" in body
    assert "123456789012" in body
    assert "School Gate" in body
    assert "Oct 18, 2026" in body
    assert "07:45 AM" in body


def test_student_message_addresses_the_student():
    student = _student(own="+639179999999")
    body = render_message(Channel(phone="+639179999999", recipient="student"), student, _record(student))

    assert body.startswith("ATTENDANCE ALERT: You (Juan Dela Cruz, LRN: 123456789012) have arrived")


def test_notify_logs_one_sent_entry_per_channel(container, gateway, juan, transport, fixed_now):
    record = _record(juan, fixed_now)

    outcomes = container.dispatcher.notify(juan, record)

    assert [o.result.delivered for o in outcomes] == [True]
    assert all(o.logged for o in outcomes)
    (log,) = container.notification_logs_repo.list_logs(student_id=juan.id)
    assert log.status == DeliveryStatus.SENT
    assert log.provider == "mock"
    assert log.message_id == "mock_1"
    assert log.sent_at == fixed_now
    assert log.error_message is None
    assert transport.sent[0][0] == "+639171234567"


def test_failed_channel_does_not_stop_next_channel(container, juan, transport):
    student = container.student_service.update(juan.id, {"student_phone": "+639179999999"})
    transport.fail_numbers = {"+639171234567"}

    outcomes = container.dispatcher.notify(student, _record(student))

    assert [o.result.delivered for o in outcomes] == [False, True]
    logs = {l.phone_number: l for l in container.notification_logs_repo.list_logs(student_id=student.id)}
    assert logs["+639171234567"].status == DeliveryStatus.FAILED
    assert logs["+639171234567"].error_message == "Mock SMS service failure"
    assert logs["+639171234567"].sent_at is None
    assert logs["+639179999999"].status == DeliveryStatus.SENT


def test_transport_exception_becomes_failed_entry(container, juan, transport, monkeypatch):
    def boom(destination, body):
        raise TimeoutError("SMS gateway timeout")

    monkeypatch.setattr(transport, "send", boom)

    (outcome,) = container.dispatcher.notify(juan, _record(juan))

    assert outcome.result.delivered is False
    assert outcome.result.error == "SMS gateway timeout"
    (log,) = container.notification_logs_repo.list_logs(student_id=juan.id)
    assert log.status == DeliveryStatus.FAILED


def test_log_write_failure_is_not_fatal(container, gateway, juan, transport):
    student = container.student_service.update(juan.id, {"student_phone": "+639179999999"})
    gateway.failures[("insert", "sms_logs")] = StorageError("sms_logs is read-only")

    outcomes = container.dispatcher.notify(student, _record(student))

    assert len(outcomes) == 2
    assert [o.logged for o in outcomes] == [False, False]
    assert len(transport.sent) == 2


def test_disabled_sms_logs_failed_attempts_without_sending(container, juan, transport):
    container.notification_settings.replace({"provider": "mock", "enabled": False})
    container.notification_settings.use_transport(transport)

    (outcome,) = container.dispatcher.notify(juan, _record(juan))

    assert outcome.result.error == SMS_DISABLED_ERROR
    assert transport.sent == []
    (log,) = container.notification_logs_repo.list_logs(student_id=juan.id)
    assert log.status == DeliveryStatus.FAILED
    assert log.error_message == SMS_DISABLED_ERROR


def test_send_test_does_not_write_logs(container, gateway, transport):
    result = container.dispatcher.send_test("+639170000000")

    assert result.delivered
    assert gateway.tables["sms_logs"] == {}
    assert "Test Student" in transport.sent[0][1]


@pytest.mark.parametrize("status", [DeliveryStatus.SENT, DeliveryStatus.FAILED])
def test_list_logs_filters_by_status(container, juan, transport, status):
    student = container.student_service.update(juan.id, {"student_phone": "+639179999999"})
    transport.fail_numbers = {"+639179999999"}
    container.dispatcher.notify(student, _record(student))

    logs = container.notification_logs_repo.list_logs(status=status)

    assert [l.status for l in logs] == [status]
