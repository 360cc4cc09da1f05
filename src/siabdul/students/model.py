from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Roster entry. `code` is the scanned NISN, `student_id` the legacy identifier."""

    student_id: str
    code: str
    name: str
    class_label: str
    guardian_phone: Optional[str] = None
    avatar: Optional[str] = None

    def with_class(self, class_label: str) -> "Student":
        return replace(self, class_label=class_label)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a bulk import: valid rows applied, bad rows skipped."""

    imported: int
    skipped: int
    errors: tuple[str, ...] = ()
