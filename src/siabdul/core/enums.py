from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status of one ledger record."""

    PRESENT = "present"
    LATE = "late"
    SICK = "sick"
    PERMISSION = "permission"
    ABSENT = "absent"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        raw = (value or "").strip().lower()
        # Older snapshots stored an unexcused absence as "alpha".
        if raw == "alpha":
            return cls.ABSENT
        return cls(raw)


class ScanOutcome(str, Enum):
    """Terminal state of one pass through the scan resolution engine."""

    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    UNKNOWN = "unknown"
    IGNORED = "ignored"


class ChannelSetting(str, Enum):
    """Channel selector stored in the WhatsApp settings."""

    LINK = "link"
    GATEWAY = "gateway"


class ChannelMode(str, Enum):
    """Effective delivery channel decided at dispatch time."""

    DIRECT_LINK = "direct_link"
    SIMULATED_GATEWAY = "simulated_gateway"
    EXTERNAL_GATEWAY = "external_gateway"


class DispatchStatus(str, Enum):
    SUBMITTED = "submitted"
    SENT = "sent"
    FAILED = "failed"
    DROPPED = "dropped"
    SKIPPED = "skipped"


class LogStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
