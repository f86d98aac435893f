from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_notification_time, now_local
from ..core.enums import DeliveryStatus
from ..students.model import Student
from .model import Channel, ChannelOutcome, DeliveryResult
from .repository import NotificationLogRepository
from .settings import NotificationSettings

logger = logging.getLogger(__name__)

SMS_DISABLED_ERROR = "SMS notifications are disabled"
GUARDIAN = "guardian"
STUDENT = "student"


def build_channels(student: Student) -> list[Channel]:
    """Guardian phone first; the student's own phone only if it is a different number."""

    channels: list[Channel] = []
    if student.parent_phone:
        channels.append(Channel(phone=student.parent_phone, recipient=GUARDIAN))
    if student.student_phone and student.student_phone != student.parent_phone:
        channels.append(Channel(phone=student.student_phone, recipient=STUDENT))
    return channels


def render_message(channel: Channel, student: Student, record: AttendanceRecord) -> str:
    date_str, time_str = format_notification_time(record.scan_timestamp)
    if channel.recipient == STUDENT:
        who = f"You ({student.name}, LRN: {student.lrn}) have"
    else:
        who = f"{student.name} (LRN: {student.lrn}) has"
    return (
        f"ATTENDANCE ALERT: {who} arrived at {record.scan_location} on {date_str} at {time_str}. "
        "Thank you for using our attendance tracking system."
    )


class NotificationDispatcher:
    """Best-effort SMS fan-out after an attendance record is committed.

    Every channel is attempted and logged on its own; nothing raised by a
    transport or by the log write escapes ``notify``.
    """

    def __init__(
        self,
        settings: NotificationSettings,
        logs: NotificationLogRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._settings = settings
        self._logs = logs
        self._clock = clock or now_local

    def notify(self, student: Student, record: AttendanceRecord) -> list[ChannelOutcome]:
        outcomes: list[ChannelOutcome] = []
        for channel in build_channels(student):
            body = render_message(channel, student, record)
            result = self._deliver(channel.phone, body)
            logged = self._log(student, channel, body, result)
            outcomes.append(ChannelOutcome(channel=channel, result=result, logged=logged))
        return outcomes

    def send_test(self, phone: str) -> DeliveryResult:
        """Send a sample alert without touching sms_logs."""

        sample = Student(id=0, lrn="123456789012", name="Test Student", grade="", section="")
        record = AttendanceRecord(
            id=0,
            student_id=0,
            lrn=sample.lrn,
            scan_timestamp=self._clock(),
            scan_location="Test Location",
            status="Present",
        )
        return self._deliver(phone, render_message(Channel(phone=phone, recipient=GUARDIAN), sample, record))

    def _deliver(self, phone: str, body: str) -> DeliveryResult:
        settings = self._settings.settings
        if not settings.enabled:
            return DeliveryResult(delivered=False, error=SMS_DISABLED_ERROR)

        transport = self._settings.transport
        try:
            result = transport.send(phone, body)
        except Exception as e:
            logger.warning("SMS via %s to %s raised: %s", settings.provider, phone, e)
            return DeliveryResult(delivered=False, error=str(e) or e.__class__.__name__)

        if result.delivered:
            logger.info("SMS via %s to %s sent (id=%s)", settings.provider, phone, result.message_id)
        else:
            logger.warning("SMS via %s to %s failed: %s", settings.provider, phone, result.error)
        return result

    def _log(self, student: Student, channel: Channel, body: str, result: DeliveryResult) -> bool:
        status = DeliveryStatus.SENT if result.delivered else DeliveryStatus.FAILED
        try:
            self._logs.append(
                student_id=student.id,
                phone_number=channel.phone,
                message=body,
                status=status,
                provider=self._settings.settings.provider,
                message_id=result.message_id,
                error_message=result.error,
                sent_at=self._clock() if result.delivered else None,
            )
        except Exception:
            logger.exception("Error logging SMS notification for student id=%s", student.id)
            return False
        return True
