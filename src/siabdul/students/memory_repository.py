from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from .model import Student


class InMemoryRosterRepository:
    """Roster kept in insertion order with an O(1) code index.

    Students are stored by legacy identifier; `_id_by_code` is the primary
    lookup index. Roster order (insertion order) is the stable order used by
    the reports.
    """

    def __init__(self, students: Sequence[Student] = ()):
        self._by_id: dict[str, Student] = {}
        self._id_by_code: dict[str, str] = {}
        for s in students:
            self.save(s)

    def find_by_key(self, key: str) -> Optional[Student]:
        key = (key or "").strip()
        if not key:
            return None
        student_id = self._id_by_code.get(key)
        if student_id is not None:
            return self._by_id[student_id]
        return self._by_id.get(key)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def get_by_code(self, code: str) -> Optional[Student]:
        student_id = self._id_by_code.get(code)
        return self._by_id.get(student_id) if student_id is not None else None

    def list_all(self) -> Sequence[Student]:
        return list(self._by_id.values())

    def list_by_class(self, class_label: str) -> Sequence[Student]:
        return [s for s in self._by_id.values() if s.class_label == class_label]

    def save(self, student: Student) -> None:
        owner = self._id_by_code.get(student.code)
        if owner is not None and owner != student.student_id:
            raise ValidationError(f"NISN {student.code} sudah digunakan")

        previous = self._by_id.get(student.student_id)
        if previous is not None and previous.code != student.code:
            self._id_by_code.pop(previous.code, None)

        self._by_id[student.student_id] = student
        self._id_by_code[student.code] = student.student_id

    def delete_by_id(self, student_id: str) -> bool:
        student = self._by_id.pop(student_id, None)
        if student is None:
            return False
        self._id_by_code.pop(student.code, None)
        return True

    def relabel_class(self, old_label: str, new_label: str) -> int:
        changed = 0
        for student_id, s in self._by_id.items():
            if s.class_label == old_label:
                self._by_id[student_id] = s.with_class(new_label)
                changed += 1
        return changed

    def replace_all(self, students: Sequence[Student]) -> None:
        self._by_id.clear()
        self._id_by_code.clear()
        for s in students:
            self.save(s)


class InMemoryClassRepository:
    def __init__(self, labels: Sequence[str] = ()):
        self._labels: set[str] = set(labels)

    def list_all(self) -> Sequence[str]:
        return sorted(self._labels)

    def exists(self, label: str) -> bool:
        return label in self._labels

    def add(self, label: str) -> None:
        self._labels.add(label)

    def rename(self, old_label: str, new_label: str) -> None:
        self._labels.discard(old_label)
        self._labels.add(new_label)

    def remove(self, label: str) -> None:
        self._labels.discard(label)

    def replace_all(self, labels: Sequence[str]) -> None:
        self._labels = set(labels)
