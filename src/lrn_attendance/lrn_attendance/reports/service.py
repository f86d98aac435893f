from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Optional

from ..attendance.model import AttendanceWithStudent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_window, now_local
from ..core.constants import DEFAULT_REPORT_DAYS
from ..students.repository import StudentRepository
from .model import AttendanceFilters, AttendanceStats, DailyAttendance, GradeAttendance

CSV_FIELDS = ["Date", "Time", "Student Name", "LRN", "Grade", "Section", "Location", "Status", "Parent Phone"]


def attendance_rate(present: int, total: int) -> float:
    """Percentage rounded to two decimals; 0 when there are no students."""
    if not total:
        return 0.0
    return round(present / total * 100, 2)


class ReportService:
    """Read-only aggregates over attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        today: Optional[Callable[[], date]] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._today = today or (lambda: now_local().date())

    def stats(self, day: Optional[date] = None) -> AttendanceStats:
        day = day or self._today()
        start, end = day_window(day)

        total = self._students.count()
        records = self._attendance.list_records(start=start, end=end)
        present = len({r.student_id for r in records})

        return AttendanceStats(
            total_students=total,
            present_today=present,
            absent_today=max(total - present, 0),
            attendance_rate=attendance_rate(present, total),
            total_scans_today=len(records),
        )

    def grade_breakdown(self, day: Optional[date] = None) -> list[GradeAttendance]:
        day = day or self._today()
        start, end = day_window(day)

        attended = {r.student_id for r in self._attendance.list_records(start=start, end=end)}
        per_grade: dict[str, list[int]] = {}
        for s in self._students.list_students():
            bucket = per_grade.setdefault(s.grade, [0, 0])
            bucket[0] += 1
            if s.id in attended:
                bucket[1] += 1

        return [
            GradeAttendance(
                grade=grade,
                total_students=total,
                present_students=present,
                attendance_rate=attendance_rate(present, total),
            )
            for grade, (total, present) in sorted(per_grade.items())
        ]

    def daily(self, days: int = DEFAULT_REPORT_DAYS, *, until: Optional[date] = None) -> list[DailyAttendance]:
        until = until or self._today()
        total = self._students.count()

        out: list[DailyAttendance] = []
        for offset in range(max(int(days), 1) - 1, -1, -1):
            day = until - timedelta(days=offset)
            start, end = day_window(day)
            records = self._attendance.list_records(start=start, end=end)
            unique = len({r.student_id for r in records})
            out.append(
                DailyAttendance(
                    date=day,
                    total_scans=len(records),
                    unique_students=unique,
                    attendance_rate=attendance_rate(unique, total),
                )
            )
        return out

    def list_attendance(self, filters: AttendanceFilters) -> list[AttendanceWithStudent]:
        start = day_window(filters.date_from)[0] if filters.date_from else None
        end = day_window(filters.date_to)[1] if filters.date_to else None

        students = self._students.list_students(
            grade=filters.grade,
            section=filters.section,
            name_contains=filters.student_name,
        )
        by_id = {s.id: s for s in students}
        if filters.filters_students and not by_id:
            return []

        records = self._attendance.list_records(
            start=start,
            end=end,
            student_ids=list(by_id) if filters.filters_students else None,
            limit=filters.limit if filters.limit and filters.limit > 0 else None,
        )
        return [AttendanceWithStudent(record=r, student=by_id[r.student_id]) for r in records if r.student_id in by_id]

    def export_rows(self, filters: AttendanceFilters) -> list[dict]:
        rows = []
        for item in self.list_attendance(filters):
            ts = item.record.scan_timestamp
            rows.append(
                {
                    "Date": ts.strftime("%Y-%m-%d"),
                    "Time": ts.strftime("%H:%M:%S"),
                    "Student Name": item.student.name,
                    "LRN": item.record.lrn,
                    "Grade": item.student.grade,
                    "Section": item.student.section,
                    "Location": item.record.scan_location,
                    "Status": item.record.status,
                    "Parent Phone": item.student.parent_phone or "",
                }
            )
        return rows
