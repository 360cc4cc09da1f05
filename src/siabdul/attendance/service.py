from __future__ import annotations

import threading
from datetime import date
from typing import Optional

from ..app_logger import get_logger
from ..common.datetime_utils import format_hm
from ..core.constants import ACTIVITY_FEED_LIMIT
from ..core.enums import AttendanceStatus
from ..reports.model import STATUS_LABELS
from ..students.repository import ClassRepository, RosterRepository
from .repository import AttendanceLedger

logger = get_logger("attendance.service")

_PRESENT = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class AttendanceService:
    """Dashboard read-models and the explicit ledger reset."""

    def __init__(
        self,
        ledger: AttendanceLedger,
        roster: RosterRepository,
        classes: ClassRepository,
        *,
        lock: Optional[threading.RLock] = None,
    ):
        self._ledger = ledger
        self._roster = roster
        self._classes = classes
        self._lock = lock or threading.RLock()

    def get_activity_ui(self, *, limit: int = ACTIVITY_FEED_LIMIT) -> list[dict]:
        with self._lock:
            rows = self._ledger.list_recent(limit)
            return [self._to_ui(r) for r in rows]

    def day_overview(self, work_date: date) -> dict:
        with self._lock:
            records = self._ledger.list_for_date(work_date)
            total = len(self._roster.list_all())
            class_stats = [self._class_stat(label, work_date) for label in self._classes.list_all()]

        present = sum(1 for r in records if r.status in _PRESENT)
        sick = sum(1 for r in records if r.status == AttendanceStatus.SICK)
        permission = sum(1 for r in records if r.status == AttendanceStatus.PERMISSION)
        absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT)
        return {
            "date": work_date.isoformat(),
            "total": total,
            "present": present,
            "sick": sick,
            "permission": permission,
            "absent": absent,
            # No record yet; not the same thing as an explicit absent mark.
            "no_information": total - (present + sick + permission + absent),
            "percentage": round(present / total * 100) if total else 0,
            "classes": class_stats,
        }

    def _class_stat(self, class_label: str, work_date: date) -> dict:
        students = self._roster.list_by_class(class_label)
        present = 0
        for s in students:
            r = self._ledger.get_for_student_and_date(s.student_id, work_date)
            if r is not None and r.status in _PRESENT:
                present += 1
        total = len(students)
        return {
            "class": class_label,
            "present": present,
            "total": total,
            "rate": round(present / total * 100) if total else 0,
        }

    def reset_ledger(self) -> int:
        with self._lock:
            removed = self._ledger.clear()
        logger.info("attendance ledger reset (%d records removed)", removed)
        return removed

    def _to_ui(self, r) -> dict:
        student = self._roster.get_by_id(r.student_id)
        css = {
            AttendanceStatus.PRESENT: "bg-success",
            AttendanceStatus.LATE: "bg-success",
            AttendanceStatus.SICK: "bg-warning text-dark",
            AttendanceStatus.PERMISSION: "bg-info",
            AttendanceStatus.ABSENT: "bg-danger",
        }.get(r.status, "bg-secondary")

        return {
            "id": r.record_id,
            "student_id": r.student_id,
            "name": student.name if student else "-",
            "class": student.class_label if student else "-",
            "date": r.day.isoformat(),
            "time": format_hm(r.timestamp),
            "status": STATUS_LABELS.get(r.status, r.status.value),
            "css_class": css,
        }
