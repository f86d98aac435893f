from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_ATTENDANCE_STATUS, DEFAULT_SCAN_LOCATION
from ..core.exceptions import (
    AlreadyScanned,
    SchemaObjectMissing,
    SetupIncomplete,
    StudentNotFound,
    UniqueViolation,
)
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SETUP_INCOMPLETE_MESSAGE = (
    "Database setup incomplete. Please run the attendance table creation script first."
)


class AttendanceRecorder:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        default_location: str = DEFAULT_SCAN_LOCATION,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock or now_local
        self._default_location = default_location

    def record_attendance(self, lrn: str, location: Optional[str] = None) -> AttendanceRecord:
        student = self._students.get_by_lrn(lrn)
        if not student:
            raise StudentNotFound("Student not found")
        return self.record_for(student, location)

    def record_for(self, student: Student, location: Optional[str] = None) -> AttendanceRecord:
        """Insert today's record for an already-resolved student.

        Raises:
            AlreadyScanned: the per-day unique key rejected the insert.
            SetupIncomplete: the attendance table does not exist.
        """

        try:
            record = self._attendance.create(
                student_id=student.id,
                lrn=student.lrn,
                scan_timestamp=self._clock(),
                scan_location=(location.strip() if isinstance(location, str) else "") or self._default_location,
                status=DEFAULT_ATTENDANCE_STATUS,
            )
        except UniqueViolation:
            raise AlreadyScanned(f"{student.name} has already been marked present today.")
        except SchemaObjectMissing as e:
            raise SetupIncomplete(SETUP_INCOMPLETE_MESSAGE) from e

        logger.info("Recorded attendance id=%s for %s at %s", record.id, student.lrn, record.scan_location)
        return record
