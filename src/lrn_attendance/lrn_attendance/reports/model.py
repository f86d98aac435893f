from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AttendanceStats:
    total_students: int
    present_today: int
    absent_today: int
    attendance_rate: float
    total_scans_today: int

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "presentToday": self.present_today,
            "absentToday": self.absent_today,
            "attendanceRate": self.attendance_rate,
            "totalScansToday": self.total_scans_today,
        }


@dataclass(frozen=True)
class GradeAttendance:
    grade: str
    total_students: int
    present_students: int
    attendance_rate: float


@dataclass(frozen=True)
class DailyAttendance:
    date: date
    total_scans: int
    unique_students: int
    attendance_rate: float


@dataclass(frozen=True)
class AttendanceFilters:
    date_from: Optional[date] = None
    date_to: Optional[date] = None  # inclusive
    grade: Optional[str] = None
    section: Optional[str] = None
    student_name: Optional[str] = None
    limit: Optional[int] = None

    @property
    def filters_students(self) -> bool:
        return bool(self.grade or self.section or self.student_name)
