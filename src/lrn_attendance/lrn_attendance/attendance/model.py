from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one scan for one student on one day."""

    id: int
    student_id: int
    lrn: str
    scan_timestamp: datetime
    scan_location: str
    status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "AttendanceRecord":
        return cls(
            id=int(row["id"]),
            student_id=int(row["student_id"]),
            lrn=str(row["lrn"]),
            scan_timestamp=row["scan_timestamp"],
            scan_location=row["scan_location"],
            status=row["status"],
            created_at=row.get("created_at"),
        )

    def summary(self) -> dict:
        return {
            "id": self.id,
            "scan_timestamp": self.scan_timestamp.isoformat(),
            "scan_location": self.scan_location,
            "status": self.status,
        }


@dataclass(frozen=True)
class AttendanceWithStudent:
    """Read-model for listings/exports (record joined with its student)."""

    record: AttendanceRecord
    student: Student
