from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..core.enums import AttendanceStatus

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.LATE: "Present",
    AttendanceStatus.SICK: "Sick",
    AttendanceStatus.PERMISSION: "Excused",
    AttendanceStatus.ABSENT: "Absent",
}

# Late counts as present in the monthly grid.
STATUS_CODES = {
    AttendanceStatus.PRESENT: "H",
    AttendanceStatus.LATE: "H",
    AttendanceStatus.SICK: "S",
    AttendanceStatus.PERMISSION: "I",
    AttendanceStatus.ABSENT: "A",
}

SUMMARY_CODES = ("H", "S", "I", "A")


@dataclass(frozen=True)
class DailyRow:
    sequence: int
    code: str
    name: str
    class_label: str
    date: str
    time_in: str
    status: str

    HEADERS: ClassVar[tuple[str, ...]] = ("No", "NISN", "Name", "Class", "Date", "Time In", "Status")

    def to_dict(self) -> dict:
        return {
            "No": self.sequence,
            "NISN": self.code,
            "Name": self.name,
            "Class": self.class_label,
            "Date": self.date,
            "Time In": self.time_in,
            "Status": self.status,
        }


@dataclass(frozen=True)
class MonthlyRow:
    sequence: int
    code: str
    name: str
    cells: tuple[str, ...]

    def count(self, letter: str) -> int:
        return sum(1 for c in self.cells if c == letter)

    @property
    def totals(self) -> dict[str, int]:
        return {letter: self.count(letter) for letter in SUMMARY_CODES}

    def values(self) -> list:
        totals = self.totals
        return [self.sequence, self.code, self.name, *self.cells, *(totals[k] for k in SUMMARY_CODES)]


@dataclass(frozen=True)
class MonthlyMatrix:
    """Read-model for the monthly grid: headers + one row per student."""

    class_label: str
    year: int
    month: int
    headers: tuple[str, ...]
    rows: tuple[MonthlyRow, ...]
    weekend_days: frozenset[int]

    @property
    def days(self) -> int:
        return len(self.headers) - 3 - len(SUMMARY_CODES)

    def weekend_columns(self) -> list[int]:
        """Header indices of Saturday/Sunday columns, for renderers."""
        return sorted(2 + day for day in self.weekend_days)

    def to_dict(self) -> dict:
        return {
            "class": self.class_label,
            "month": f"{self.year:04d}-{self.month:02d}",
            "headers": list(self.headers),
            "rows": [dict(zip(self.headers, r.values())) for r in self.rows],
            "weekend_days": sorted(self.weekend_days),
        }
