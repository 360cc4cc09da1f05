from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class RosterRepository(Protocol):
    """Read/write access to the student roster.

    The attendance engines only use `find_by_key`, `get_by_id` and `list_by_class`.
    """

    def find_by_key(self, key: str) -> Optional[Student]:
        """Look up by primary code, falling back to the legacy identifier."""
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_class(self, class_label: str) -> Sequence[Student]:
        raise NotImplementedError

    def save(self, student: Student) -> None:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError

    def relabel_class(self, old_label: str, new_label: str) -> int:
        raise NotImplementedError

    def replace_all(self, students: Sequence[Student]) -> None:
        raise NotImplementedError


class ClassRepository(Protocol):
    def list_all(self) -> Sequence[str]:
        raise NotImplementedError

    def exists(self, label: str) -> bool:
        raise NotImplementedError

    def add(self, label: str) -> None:
        raise NotImplementedError

    def rename(self, old_label: str, new_label: str) -> None:
        raise NotImplementedError

    def remove(self, label: str) -> None:
        raise NotImplementedError

    def replace_all(self, labels: Sequence[str]) -> None:
        raise NotImplementedError
