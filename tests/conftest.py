from __future__ import annotations

import threading
from datetime import datetime

import pytest

from siabdul.attendance.memory_ledger import InMemoryAttendanceLedger
from siabdul.students.memory_repository import InMemoryClassRepository, InMemoryRosterRepository
from siabdul.students.model import Student


@pytest.fixture
def fixed_now() -> datetime:
    # A Monday morning.
    return datetime(2025, 1, 6, 7, 5, 0)


@pytest.fixture
def students() -> list[Student]:
    return [
        Student(student_id="STU-001", code="0012345678", name="Ahmad Santoso", class_label="12 IPA 1", guardian_phone="6281234567890"),
        Student(student_id="STU-002", code="0012345679", name="Budi Pratama", class_label="12 IPA 1", guardian_phone="081234567891"),
        Student(student_id="STU-003", code="0012345680", name="Citra Dewi", class_label="12 IPA 2"),
    ]


@pytest.fixture
def roster(students) -> InMemoryRosterRepository:
    return InMemoryRosterRepository(students)


@pytest.fixture
def classes(students) -> InMemoryClassRepository:
    return InMemoryClassRepository({s.class_label for s in students})


@pytest.fixture
def ledger() -> InMemoryAttendanceLedger:
    return InMemoryAttendanceLedger()


@pytest.fixture
def lock() -> threading.RLock:
    return threading.RLock()
