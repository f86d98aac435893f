from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.lrn_attendance.lrn_attendance.container import build_container
from src.lrn_attendance.lrn_attendance.core.exceptions import ConflictError

DEMO_STUDENTS = [
    {
        "lrn": "123456789012",
        "name": "Juan Dela Cruz",
        "grade": "Grade 7",
        "section": "A",
        "parent_phone": "+639171234567",
    },
    {
        "lrn": "123456789013",
        "name": "Maria Santos",
        "grade": "Grade 7",
        "section": "B",
        "parent_phone": "+639181234567",
        "student_phone": "+639191234567",
    },
    {
        "lrn": "123456789014",
        "name": "Jose Rizal",
        "grade": "Grade 8",
        "section": "A",
    },
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), notify_async=False)

    created = 0
    for data in DEMO_STUDENTS:
        try:
            container.student_service.register(data)
            created += 1
        except ConflictError:
            pass

    print(f"OK: Seeded {created} demo student(s) ({len(DEMO_STUDENTS) - created} already present)")


if __name__ == "__main__":
    main()
