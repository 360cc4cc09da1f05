from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceLedger(Protocol):
    """Authoritative store of attendance records.

    Holds at most one record per (student_id, calendar day).
    """

    def has_record(self, student_id: str, work_date: date) -> bool:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def append(self, record: AttendanceRecord) -> None:
        """Insert a record; raises DuplicateDateError when the day is taken and
        ValidationError when the record id is already in use."""
        raise NotImplementedError

    def replace(
        self,
        student_id: str,
        work_date: date,
        status: AttendanceStatus,
        *,
        timestamp: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Delete the day's record if any, then insert a new one."""
        raise NotImplementedError

    def remove_all_for_student(self, student_id: str) -> int:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def replace_all(self, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError
