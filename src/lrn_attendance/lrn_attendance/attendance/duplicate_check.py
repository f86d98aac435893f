from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import day_window, now_local
from ..core.exceptions import SchemaObjectMissing, StorageError
from ..students.repository import StudentRepository
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class DuplicateScanCheck:
    """Answers "has this LRN already been scanned today?".

    The server-side ``has_scanned_today`` function is tried first. When it
    (or the attendance table) does not exist yet, the same check is done by
    hand: LRN -> student id, then a query over today's window. The manual
    path fails open (read errors count as "not scanned"); the per-day
    unique key on the attendance table still rejects a real duplicate at
    insert time.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock or now_local

    def has_scanned_today(self, lrn: str) -> bool:
        try:
            return self._attendance.scanned_today(lrn)
        except SchemaObjectMissing as e:
            logger.info("has_scanned_today unavailable (%s); using fallback lookup", e)
            return self._fallback(lrn)

    def _fallback(self, lrn: str) -> bool:
        start, end = day_window(self._clock().date())
        try:
            student = self._students.get_by_lrn(lrn)
            if not student:
                return False
            return self._attendance.exists_in_window(student.id, start, end)
        except StorageError as e:
            logger.warning("Fallback scan check for %s failed, treating as not scanned: %s", lrn, e)
            return False
