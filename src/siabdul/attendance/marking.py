from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.repository import RosterRepository
from .model import AttendanceRecord
from .repository import AttendanceLedger

MARKABLE_STATUSES = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.SICK,
        AttendanceStatus.PERMISSION,
        AttendanceStatus.ABSENT,
    }
)


class ManualMarkingService:
    """Use case: mark sick/permission/absent (or present) by hand.

    Always goes through `ledger.replace`, so marking a student who already has
    a record for today swaps it instead of adding a second one. Guardian
    notifications are only sent from the scan path.
    """

    def __init__(self, roster: RosterRepository, ledger: AttendanceLedger, *, lock: Optional[threading.RLock] = None):
        self._roster = roster
        self._ledger = ledger
        self._lock = lock or threading.RLock()

    def unmarked_students(self, class_label: str, work_date: date) -> list[Student]:
        with self._lock:
            return [
                s
                for s in self._roster.list_by_class(class_label)
                if not self._ledger.has_record(s.student_id, work_date)
            ]

    def mark(self, student_id: str, status: AttendanceStatus, *, now: Optional[datetime] = None) -> AttendanceRecord:
        if status not in MARKABLE_STATUSES:
            raise ValidationError(f"Status {status.value} tidak dapat ditandai manual")

        now = now or now_local()
        with self._lock:
            if self._roster.get_by_id(student_id) is None:
                raise ValidationError("Siswa tidak ditemukan")
            return self._ledger.replace(student_id, now.date(), status, timestamp=now)
