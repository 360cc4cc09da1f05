from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ScanOutcome
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """One ledger entry. At most one exists per (student_id, day)."""

    record_id: str
    student_id: str
    timestamp: datetime
    status: AttendanceStatus

    @property
    def day(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class ScanResult:
    """What the scan station shows after one decoded input."""

    outcome: ScanOutcome
    code: str
    message: str
    student: Optional[Student] = None
    record: Optional[AttendanceRecord] = None

    @property
    def is_error(self) -> bool:
        return self.outcome == ScanOutcome.UNKNOWN

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "code": self.code,
            "message": self.message,
            "is_error": self.is_error,
            "student": None
            if self.student is None
            else {
                "id": self.student.student_id,
                "nisn": self.student.code,
                "name": self.student.name,
                "class": self.student.class_label,
            },
            "timestamp": self.record.timestamp.isoformat(timespec="seconds") if self.record else None,
        }
