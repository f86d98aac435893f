from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Optional

from ..common.validators import is_valid_lrn
from ..core.enums import ScanStatus
from ..core.exceptions import AlreadyScanned, SetupIncomplete, StorageError
from ..notifications.dispatcher import NotificationDispatcher
from ..students.model import Student
from ..students.repository import StudentRepository
from .duplicate_check import DuplicateScanCheck
from .model import AttendanceRecord
from .recorder import AttendanceRecorder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    """Terminal state of one scan request plus what the scanner UI shows."""

    status: ScanStatus
    message: str
    student: Optional[Student] = None
    attendance: Optional[AttendanceRecord] = None

    @property
    def success(self) -> bool:
        return self.status == ScanStatus.COMPLETED

    @property
    def already_scanned(self) -> bool:
        return self.status == ScanStatus.ALREADY_SCANNED


class ScanService:
    """Use case: mark a student present from a scanned LRN.

    Validating -> ResolvingStudent -> CheckingDuplicate -> Recording ->
    Notifying -> Completed. Nothing is retried; a rejected scan is only
    re-run by a new request. Notification happens after the record is
    committed and its outcome never changes the returned state.
    """

    def __init__(
        self,
        students: StudentRepository,
        duplicate_check: DuplicateScanCheck,
        recorder: AttendanceRecorder,
        dispatcher: NotificationDispatcher,
        *,
        executor: Optional[Executor] = None,
    ):
        self._students = students
        self._duplicate_check = duplicate_check
        self._recorder = recorder
        self._dispatcher = dispatcher
        self._executor = executor

    def scan(self, lrn: object, location: object = None) -> ScanOutcome:
        if not isinstance(location, str):
            location = None
        if not lrn:
            return ScanOutcome(ScanStatus.BAD_FORMAT, "LRN is required")
        if not is_valid_lrn(lrn):
            return ScanOutcome(ScanStatus.BAD_FORMAT, "Invalid LRN format. Must be 12 digits.")

        try:
            student = self._students.get_by_lrn(lrn)
        except StorageError:
            logger.exception("Student lookup failed for %s", lrn)
            return ScanOutcome(ScanStatus.INTERNAL_ERROR, "Internal server error. Please try again.")
        if not student:
            return ScanOutcome(ScanStatus.NOT_FOUND, "Student not found. Please check the LRN.")

        try:
            if self._duplicate_check.has_scanned_today(lrn):
                return self._already_scanned(student)
        except StorageError:
            logger.exception("Duplicate-scan check failed for %s", lrn)
            return ScanOutcome(ScanStatus.INTERNAL_ERROR, "Internal server error. Please try again.", student=student)

        try:
            record = self._recorder.record_for(student, location)
        except AlreadyScanned:
            # Lost a race with a concurrent scan; the unique key decided.
            return self._already_scanned(student)
        except SetupIncomplete as e:
            return ScanOutcome(ScanStatus.SETUP_INCOMPLETE, str(e), student=student)
        except StorageError:
            logger.exception("Recording attendance failed for %s", lrn)
            return ScanOutcome(ScanStatus.INTERNAL_ERROR, "Internal server error. Please try again.", student=student)

        self._notify(student, record)

        return ScanOutcome(
            ScanStatus.COMPLETED,
            f"{student.name} marked as present successfully!",
            student=student,
            attendance=record,
        )

    def _already_scanned(self, student: Student) -> ScanOutcome:
        return ScanOutcome(
            ScanStatus.ALREADY_SCANNED,
            f"{student.name} has already been marked present today.",
            student=student,
        )

    def _notify(self, student: Student, record: AttendanceRecord) -> None:
        if self._executor is None:
            self._run_notify(student, record)
            return
        try:
            self._executor.submit(self._run_notify, student, record)
        except RuntimeError:
            # Executor already shut down (process exiting); send inline.
            self._run_notify(student, record)

    def _run_notify(self, student: Student, record: AttendanceRecord) -> None:
        try:
            self._dispatcher.notify(student, record)
        except Exception:
            logger.exception("Error sending SMS notification for %s", student.lrn)
