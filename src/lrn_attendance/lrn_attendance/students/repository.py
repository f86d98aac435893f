from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..database.gateway import Filter, Order, StorageGateway, eq, ilike
from .model import Student, StudentForm


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): the service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_lrn(self, lrn: str) -> Optional[Student]:
        raise NotImplementedError

    def list_students(
        self,
        *,
        grade: Optional[str] = None,
        section: Optional[str] = None,
        name_contains: Optional[str] = None,
    ) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, form: StudentForm) -> Student:
        raise NotImplementedError

    def update(self, student_id: int, patch: Mapping[str, Any]) -> Optional[Student]:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


class GatewayStudentRepository(StudentRepository):
    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    def get_by_id(self, student_id: int) -> Optional[Student]:
        row = self._gateway.find_one("students", [eq("id", int(student_id))])
        return Student.from_row(row) if row else None

    def get_by_lrn(self, lrn: str) -> Optional[Student]:
        row = self._gateway.find_one("students", [eq("lrn", lrn)])
        return Student.from_row(row) if row else None

    def list_students(
        self,
        *,
        grade: Optional[str] = None,
        section: Optional[str] = None,
        name_contains: Optional[str] = None,
    ) -> Sequence[Student]:
        filters: list[Filter] = []
        if grade:
            filters.append(eq("grade", grade))
        if section:
            filters.append(eq("section", section))
        if name_contains:
            filters.append(ilike("name", name_contains))
        rows = self._gateway.query("students", filters, order=Order("name"))
        return [Student.from_row(r) for r in rows]

    def create(self, form: StudentForm) -> Student:
        row = self._gateway.insert(
            "students",
            {
                "lrn": form.lrn,
                "name": form.name,
                "grade": form.grade,
                "section": form.section,
                "parent_phone": form.parent_phone,
                "student_phone": form.student_phone,
            },
        )
        return Student.from_row(row)

    def update(self, student_id: int, patch: Mapping[str, Any]) -> Optional[Student]:
        row = self._gateway.update("students", int(student_id), dict(patch))
        return Student.from_row(row) if row else None

    def delete(self, student_id: int) -> bool:
        # attendance and sms_logs rows go with it (ON DELETE CASCADE).
        return self._gateway.delete("students", int(student_id))

    def count(self) -> int:
        return self._gateway.count("students")
