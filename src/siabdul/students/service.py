from __future__ import annotations

import threading
import uuid
from typing import Iterable, Mapping, Optional
from urllib.parse import quote

from ..app_logger import get_logger
from ..attendance.repository import AttendanceLedger
from ..common.validators import digits_only, require_digits, require_non_empty
from ..core.exceptions import ValidationError
from .model import ImportResult, Student
from .repository import ClassRepository, RosterRepository

logger = get_logger("students.service")

CSV_COLUMNS = ("Name", "NISN", "ParentPhone")


def new_student_id() -> str:
    return f"STU-{uuid.uuid4().hex[:8].upper()}"


def avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random&color=fff&size=200"


class RosterService:
    """Use case: maintain students and classes.

    Deleting a student cascades into the attendance ledger.
    """

    def __init__(
        self,
        roster: RosterRepository,
        classes: ClassRepository,
        ledger: AttendanceLedger,
        *,
        lock: Optional[threading.RLock] = None,
    ):
        self._roster = roster
        self._classes = classes
        self._ledger = ledger
        self._lock = lock or threading.RLock()

    def list_students(self, class_label: Optional[str] = None) -> list[Student]:
        with self._lock:
            if class_label:
                return list(self._roster.list_by_class(class_label))
            return list(self._roster.list_all())

    def get_student(self, student_id: str) -> Student:
        student = self._roster.get_by_id(student_id)
        if not student:
            raise ValidationError("Siswa tidak ditemukan")
        return student

    def save_student(
        self,
        *,
        name: str,
        code: str,
        class_label: str,
        guardian_phone: Optional[str] = None,
        student_id: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Student:
        name = require_non_empty(name, "Nama")
        code = require_digits(code, "NISN")
        class_label = require_non_empty(class_label, "Kelas")
        phone = digits_only(guardian_phone) or None

        with self._lock:
            existing = self._roster.get_by_id(student_id) if student_id else None
            student = Student(
                student_id=student_id or new_student_id(),
                code=code,
                name=name,
                class_label=class_label,
                guardian_phone=phone,
                avatar=avatar or (existing.avatar if existing else None) or avatar_url(name),
            )
            self._roster.save(student)
            if not self._classes.exists(class_label):
                self._classes.add(class_label)
        return student

    def delete_student(self, student_id: str) -> int:
        """Remove the student and every attendance record they own."""
        with self._lock:
            if not self._roster.delete_by_id(student_id):
                raise ValidationError("Siswa tidak ditemukan")
            removed = self._ledger.remove_all_for_student(student_id)
        logger.info("student %s deleted with %d attendance records", student_id, removed)
        return removed

    def list_classes(self) -> list[str]:
        return list(self._classes.list_all())

    def add_class(self, label: str) -> None:
        label = require_non_empty(label, "Nama kelas")
        with self._lock:
            if self._classes.exists(label):
                raise ValidationError("Kelas sudah ada!")
            self._classes.add(label)

    def rename_class(self, old_label: str, new_label: str) -> int:
        new_label = require_non_empty(new_label, "Nama kelas")
        with self._lock:
            if not self._classes.exists(old_label):
                raise ValidationError("Kelas tidak ditemukan")
            if new_label == old_label:
                return 0
            if self._classes.exists(new_label):
                raise ValidationError("Nama kelas sudah digunakan.")
            self._classes.rename(old_label, new_label)
            return self._roster.relabel_class(old_label, new_label)

    def delete_class(self, label: str) -> None:
        with self._lock:
            if not self._classes.exists(label):
                raise ValidationError("Kelas tidak ditemukan")
            members = len(self._roster.list_by_class(label))
            if members > 0:
                raise ValidationError(
                    f'Tidak dapat menghapus kelas "{label}" karena masih berisi {members} siswa. '
                    "Hapus atau pindahkan siswa terlebih dahulu."
                )
            self._classes.remove(label)

    def import_students(self, rows: Iterable[Mapping[str, object]], *, class_label: str) -> ImportResult:
        """Spreadsheet import: rows with Name and NISN; bad or duplicate rows are skipped."""
        class_label = require_non_empty(class_label, "Kelas")
        imported = 0
        errors: list[str] = []

        with self._lock:
            for line_no, row in enumerate(rows, start=2):
                name = str(row.get("Name") or "").strip()
                code = digits_only(str(row.get("NISN") or ""))
                if not name or not code:
                    errors.append(f"Baris {line_no}: Name dan NISN wajib diisi")
                    continue
                if self._roster.get_by_code(code) is not None:
                    errors.append(f"Baris {line_no}: NISN {code} sudah terdaftar")
                    continue

                phone = digits_only(str(row.get("ParentPhone") or "")) or None
                self._roster.save(
                    Student(
                        student_id=new_student_id(),
                        code=code,
                        name=name,
                        class_label=class_label,
                        guardian_phone=phone,
                        avatar=avatar_url(name),
                    )
                )
                imported += 1

            if imported and not self._classes.exists(class_label):
                self._classes.add(class_label)

        logger.info("student import into %s: %d imported, %d skipped", class_label, imported, len(errors))
        return ImportResult(imported=imported, skipped=len(errors), errors=tuple(errors))
