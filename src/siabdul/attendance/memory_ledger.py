from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateDateError, ValidationError
from .model import AttendanceRecord


def new_record_id() -> str:
    return str(uuid.uuid4())


class InMemoryAttendanceLedger:
    """Ledger held in process memory.

    `_records` keeps insertion order (oldest first) for activity feeds;
    `_by_key` indexes (student_id, day) -> record_id for the dedup checks and
    the report lookups.
    """

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self._records: dict[str, AttendanceRecord] = {}
        self._by_key: dict[tuple[str, date], str] = {}
        for r in records:
            self.append(r)

    def has_record(self, student_id: str, work_date: date) -> bool:
        return (student_id, work_date) in self._by_key

    def get_for_student_and_date(self, student_id: str, work_date: date) -> Optional[AttendanceRecord]:
        record_id = self._by_key.get((student_id, work_date))
        return self._records.get(record_id) if record_id is not None else None

    def append(self, record: AttendanceRecord) -> None:
        key = (record.student_id, record.day)
        if key in self._by_key:
            raise DuplicateDateError(f"Siswa {record.student_id} sudah memiliki catatan pada {record.day.isoformat()}")
        if record.record_id in self._records:
            raise ValidationError(f"ID catatan {record.record_id} sudah dipakai")
        self._records[record.record_id] = record
        self._by_key[key] = record.record_id

    def replace(
        self,
        student_id: str,
        work_date: date,
        status: AttendanceStatus,
        *,
        timestamp: Optional[datetime] = None,
    ) -> AttendanceRecord:
        timestamp = timestamp or datetime.combine(work_date, now_local().time())
        if timestamp.date() != work_date:
            raise ValidationError("Waktu catatan tidak sesuai dengan tanggal")

        existing_id = self._by_key.pop((student_id, work_date), None)
        if existing_id is not None:
            self._records.pop(existing_id, None)

        record = AttendanceRecord(
            record_id=new_record_id(),
            student_id=student_id,
            timestamp=timestamp,
            status=status,
        )
        self.append(record)
        return record

    def remove_all_for_student(self, student_id: str) -> int:
        doomed = [rid for rid, r in self._records.items() if r.student_id == student_id]
        for rid in doomed:
            r = self._records.pop(rid)
            self._by_key.pop((r.student_id, r.day), None)
        return len(doomed)

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        self._by_key.clear()
        return count

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        items = list(reversed(self._records.values()))
        return items[:limit]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return [r for r in self._records.values() if r.day == work_date]

    def list_all(self) -> Sequence[AttendanceRecord]:
        return list(self._records.values())

    def replace_all(self, records: Sequence[AttendanceRecord]) -> None:
        self.clear()
        for r in records:
            self.append(r)
