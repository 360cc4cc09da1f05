from __future__ import annotations

import calendar
from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month_key(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def format_hm(value: datetime) -> str:
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
