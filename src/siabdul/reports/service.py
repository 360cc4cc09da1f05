from __future__ import annotations

import threading
from datetime import date
from typing import Optional

from ..common.datetime_utils import days_in_month, format_hm, is_weekend, parse_month_key
from ..core.constants import NO_INFORMATION_LABEL, NO_RECORD_MARK, NO_TIME_MARK
from ..core.enums import AttendanceStatus
from ..attendance.repository import AttendanceLedger
from ..students.repository import RosterRepository
from .model import STATUS_CODES, STATUS_LABELS, SUMMARY_CODES, DailyRow, MonthlyMatrix, MonthlyRow

PRESENT_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class ReportService:
    """Read-side projections of the ledger. Recomputed on every call."""

    def __init__(self, roster: RosterRepository, ledger: AttendanceLedger, *, lock: Optional[threading.RLock] = None):
        self._roster = roster
        self._ledger = ledger
        self._lock = lock or threading.RLock()

    def daily_rows(self, class_label: str, work_date: date) -> list[DailyRow]:
        out: list[DailyRow] = []
        with self._lock:
            students = self._roster.list_by_class(class_label)
            for index, s in enumerate(students, start=1):
                record = self._ledger.get_for_student_and_date(s.student_id, work_date)
                out.append(
                    DailyRow(
                        sequence=index,
                        code=s.code,
                        name=s.name,
                        class_label=s.class_label,
                        date=work_date.isoformat(),
                        time_in=format_hm(record.timestamp) if record else NO_TIME_MARK,
                        status=STATUS_LABELS[record.status] if record else NO_INFORMATION_LABEL,
                    )
                )
        return out

    def monthly_matrix(self, class_label: str, month_key: str) -> MonthlyMatrix:
        year, month = parse_month_key(month_key)
        n_days = days_in_month(year, month)
        headers = ("No", "NISN", "Name", *(str(d) for d in range(1, n_days + 1)), *SUMMARY_CODES)
        weekend_days = frozenset(d for d in range(1, n_days + 1) if is_weekend(date(year, month, d)))

        rows: list[MonthlyRow] = []
        with self._lock:
            students = self._roster.list_by_class(class_label)
            for index, s in enumerate(students, start=1):
                cells = []
                for d in range(1, n_days + 1):
                    record = self._ledger.get_for_student_and_date(s.student_id, date(year, month, d))
                    cells.append(STATUS_CODES.get(record.status, NO_RECORD_MARK) if record else NO_RECORD_MARK)
                rows.append(MonthlyRow(sequence=index, code=s.code, name=s.name, cells=tuple(cells)))

        return MonthlyMatrix(
            class_label=class_label,
            year=year,
            month=month,
            headers=headers,
            rows=tuple(rows),
            weekend_days=weekend_days,
        )

    def summary_payload(self, work_date: date) -> dict:
        """Input document for the report summarizer."""
        with self._lock:
            students = self._roster.list_all()
            present_ids = {
                r.student_id for r in self._ledger.list_for_date(work_date) if r.status in PRESENT_STATUSES
            }

        present = [s.name for s in students if s.student_id in present_ids]
        absent = [s.name for s in students if s.student_id not in present_ids]
        total = len(students)
        rate = (len(present) / total * 100) if total else 0.0
        return {
            "date": work_date.strftime("%d/%m/%Y"),
            "totalStudents": total,
            "presentCount": len(present),
            "absentCount": len(absent),
            "presentNames": present,
            "absentNames": absent,
            "attendanceRate": f"{rate:.1f}%",
        }
