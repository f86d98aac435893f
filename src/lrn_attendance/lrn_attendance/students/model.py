from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered learner, keyed externally by a 12-digit LRN."""

    id: int
    lrn: str
    name: str
    grade: str
    section: str
    parent_phone: Optional[str] = None
    student_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "Student":
        return cls(
            id=int(row["id"]),
            lrn=str(row["lrn"]),
            name=row["name"],
            grade=row["grade"],
            section=row["section"],
            parent_phone=row.get("parent_phone"),
            student_phone=row.get("student_phone"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def identity(self) -> dict:
        """Subset echoed back to scanners."""
        return {"name": self.name, "grade": self.grade, "section": self.section, "lrn": self.lrn}


@dataclass(frozen=True)
class StudentForm:
    lrn: str
    name: str
    grade: str
    section: str
    parent_phone: Optional[str] = None
    student_phone: Optional[str] = None
