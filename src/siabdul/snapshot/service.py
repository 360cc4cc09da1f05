from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..app_logger import get_logger
from ..attendance.memory_ledger import new_record_id
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceLedger
from ..common.validators import digits_only
from ..core.enums import AttendanceStatus
from ..core.exceptions import ImportValidationError, ValidationError
from ..notifications.model import DispatchConfig
from ..notifications.settings_store import SettingsStore
from ..students.model import Student
from ..students.repository import ClassRepository, RosterRepository

logger = get_logger("snapshot")


@dataclass(frozen=True)
class SnapshotImportResult:
    students: int
    attendance: int
    classes: int
    skipped: int
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "students": self.students,
            "attendance": self.attendance,
            "classes": self.classes,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


def _parse_timestamp(value: Any) -> datetime:
    text = str(value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class SnapshotService:
    """Backup & restore of the whole in-memory state as one JSON document.

    Import builds the new state first and swaps it in under the store lock, so
    readers never see a half-restored ledger. Sections missing from the
    document keep their current content.
    """

    def __init__(
        self,
        roster: RosterRepository,
        classes: ClassRepository,
        ledger: AttendanceLedger,
        settings: SettingsStore,
        *,
        lock: Optional[threading.RLock] = None,
    ):
        self._roster = roster
        self._classes = classes
        self._ledger = ledger
        self._settings = settings
        self._lock = lock or threading.RLock()

    def export_snapshot(self) -> dict:
        with self._lock:
            students = list(self._roster.list_all())
            records = list(reversed(self._ledger.list_all()))
            classes = list(self._classes.list_all())
        return {
            "students": [
                {
                    "id": s.student_id,
                    "nisn": s.code,
                    "name": s.name,
                    "grade": s.class_label,
                    "avatar": s.avatar,
                    "parentPhone": s.guardian_phone,
                }
                for s in students
            ],
            # Newest first, like the activity feed.
            "attendance": [
                {
                    "id": r.record_id,
                    "studentId": r.student_id,
                    "timestamp": r.timestamp.isoformat(),
                    "status": r.status.value,
                }
                for r in records
            ],
            "classes": classes,
            "schoolName": self._settings.school_name,
            "waConfig": self._settings.config.to_dict(),
        }

    def export_json(self) -> str:
        return json.dumps(self.export_snapshot(), indent=2, ensure_ascii=False)

    def save_file(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_json(), encoding="utf-8")

    def load_file(self, path: Path) -> SnapshotImportResult:
        return self.import_json(path.read_text(encoding="utf-8"), confirmed=True)

    def import_json(self, text: str, *, confirmed: bool) -> SnapshotImportResult:
        try:
            document = json.loads(text)
        except ValueError as e:
            raise ImportValidationError("File backup tidak valid.") from e
        return self.import_snapshot(document, confirmed=confirmed)

    def import_snapshot(self, document: Any, *, confirmed: bool) -> SnapshotImportResult:
        if not confirmed:
            raise ValidationError("Pemulihan data memerlukan konfirmasi")
        if not isinstance(document, dict):
            raise ImportValidationError("File backup tidak valid.")
        for key in ("students", "attendance", "classes"):
            if key in document and not isinstance(document[key], list):
                raise ImportValidationError(f"Bagian '{key}' pada file backup tidak valid.")

        errors: list[str] = []
        with self._lock:
            students = (
                self._read_students(document["students"], errors)
                if "students" in document
                else list(self._roster.list_all())
            )
            known_ids = {s.student_id for s in students}

            labels = set(self._classes.list_all())
            if "classes" in document:
                labels = {str(c).strip() for c in document["classes"] if str(c or "").strip()}
            labels.update(s.class_label for s in students)

            if "attendance" in document:
                records = self._read_attendance(document["attendance"], known_ids, errors)
            else:
                records = [r for r in self._ledger.list_all() if r.student_id in known_ids]

            config = None
            if isinstance(document.get("waConfig"), dict):
                try:
                    config = DispatchConfig.from_dict(document["waConfig"], base=self._settings.config)
                except ValueError as e:
                    errors.append(f"waConfig: {e}")
            school_name = document.get("schoolName")
            school_name = str(school_name).strip() if school_name else None

            self._roster.replace_all(students)
            self._classes.replace_all(sorted(labels))
            self._ledger.replace_all(records)
            self._settings.restore(config=config, school_name=school_name)

        result = SnapshotImportResult(
            students=len(students),
            attendance=len(records),
            classes=len(labels),
            skipped=len(errors),
            errors=tuple(errors),
        )
        logger.info(
            "snapshot restored: %d students, %d records, %d classes, %d rows skipped",
            result.students,
            result.attendance,
            result.classes,
            result.skipped,
        )
        return result

    def _read_students(self, rows: list, errors: list[str]) -> list[Student]:
        out: list[Student] = []
        seen_ids: set[str] = set()
        seen_codes: set[str] = set()
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                errors.append(f"students[{i}]: bukan objek")
                continue
            student_id = str(row.get("id") or "").strip()
            code = str(row.get("nisn") or "").strip()
            name = str(row.get("name") or "").strip()
            grade = str(row.get("grade") or "").strip()
            if not (student_id and code and name and grade):
                errors.append(f"students[{i}]: id, nisn, name dan grade wajib diisi")
                continue
            if not code.isdigit():
                errors.append(f"students[{i}]: NISN {code!r} harus berupa angka")
                continue
            if code in seen_codes or student_id in seen_ids:
                errors.append(f"students[{i}]: NISN {code} atau ID {student_id} ganda")
                continue
            seen_codes.add(code)
            seen_ids.add(student_id)
            out.append(
                Student(
                    student_id=student_id,
                    code=code,
                    name=name,
                    class_label=grade,
                    guardian_phone=digits_only(str(row.get("parentPhone") or "")) or None,
                    avatar=row.get("avatar") or None,
                )
            )
        return out

    def _read_attendance(self, rows: list, known_ids: set[str], errors: list[str]) -> list[AttendanceRecord]:
        out: list[AttendanceRecord] = []
        taken: set[tuple] = set()
        used_ids: set[str] = set()
        # Documents list newest first; rebuild the ledger oldest first.
        for i in reversed(range(len(rows))):
            row = rows[i]
            if not isinstance(row, dict):
                errors.append(f"attendance[{i}]: bukan objek")
                continue
            student_id = str(row.get("studentId") or "").strip()
            if student_id not in known_ids:
                errors.append(f"attendance[{i}]: siswa {student_id!r} tidak dikenal")
                continue
            try:
                timestamp = _parse_timestamp(row.get("timestamp"))
                status = AttendanceStatus.parse(str(row.get("status") or ""))
            except ValueError as e:
                errors.append(f"attendance[{i}]: {e}")
                continue
            key = (student_id, timestamp.date())
            if key in taken:
                errors.append(f"attendance[{i}]: catatan ganda untuk {student_id} pada {timestamp.date().isoformat()}")
                continue
            record_id = str(row.get("id") or "").strip()
            if record_id in used_ids:
                errors.append(f"attendance[{i}]: ID catatan {record_id} ganda")
                continue
            taken.add(key)
            record_id = record_id or new_record_id()
            used_ids.add(record_id)
            out.append(
                AttendanceRecord(
                    record_id=record_id,
                    student_id=student_id,
                    timestamp=timestamp,
                    status=status,
                )
            )
        return out
