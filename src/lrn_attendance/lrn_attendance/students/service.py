from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_phone, require_lrn, require_non_empty
from ..core.exceptions import ConflictError, StudentNotFound, UniqueViolation, ValidationError
from .model import Student, StudentForm
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "grade", "section", "parent_phone", "student_phone")


class StudentService:
    """Use cases: register, edit, list and remove students."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self, *, grade: Optional[str] = None, section: Optional[str] = None) -> Sequence[Student]:
        return self._students.list_students(grade=grade, section=section)

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise StudentNotFound("Student not found")
        return student

    def register(self, data: Mapping[str, Any]) -> Student:
        if not all(data.get(k) for k in ("lrn", "name", "grade", "section")):
            raise ValidationError("Missing required fields")
        if not isinstance(data.get("lrn"), str):
            raise ValidationError("LRN must be exactly 12 digits")

        try:
            lrn = require_lrn(data["lrn"].strip())
        except ValidationError:
            raise ValidationError("LRN must be exactly 12 digits")

        form = StudentForm(
            lrn=lrn,
            name=require_non_empty(data["name"], "Name"),
            grade=require_non_empty(data["grade"], "Grade"),
            section=require_non_empty(data["section"], "Section"),
            parent_phone=optional_phone(data.get("parent_phone")),
            student_phone=optional_phone(data.get("student_phone")),
        )

        try:
            student = self._students.create(form)
        except UniqueViolation:
            raise ConflictError("A student with this LRN already exists")

        logger.info("Registered student %s (%s)", student.lrn, student.name)
        return student

    def update(self, student_id: int, data: Mapping[str, Any]) -> Student:
        current = self.get(student_id)

        if "lrn" in data and data["lrn"] != current.lrn:
            raise ValidationError("LRN cannot be changed once assigned")

        patch: dict[str, Any] = {}
        for field in _EDITABLE_FIELDS:
            if field not in data:
                continue
            if field.endswith("_phone"):
                patch[field] = optional_phone(data[field])
            else:
                patch[field] = require_non_empty(data[field], field.capitalize())

        updated = self._students.update(student_id, patch)
        if not updated:
            raise StudentNotFound("Student not found")
        return updated

    def delete(self, student_id: int) -> None:
        if not self._students.delete(student_id):
            raise StudentNotFound("Student not found")
        logger.info("Deleted student id=%s with its attendance history", student_id)
