from __future__ import annotations

import threading
from datetime import datetime
from functools import partial
from typing import Optional

from ..app_logger import get_logger
from ..common.datetime_utils import now_local
from ..core.constants import PRIMARY_CODE_LENGTH
from ..core.enums import AttendanceStatus, ScanOutcome
from ..core.exceptions import UnknownCodeError
from ..notifications.outbound_queue import OutboundQueue
from ..notifications.router import DispatchRouter
from ..notifications.settings_store import SettingsStore
from ..students.model import Student
from ..students.repository import RosterRepository
from .memory_ledger import new_record_id
from .model import AttendanceRecord, ScanResult
from .repository import AttendanceLedger

logger = get_logger("attendance.scan")


class ScanResolutionEngine:
    """Turns one decoded code into at most one ledger write.

    LOOKUP (code, then legacy id) -> UNKNOWN, or DEDUP_CHECK -> DUPLICATE,
    or RECORD -> NOTIFY_TRIGGER. `scan` adds the device-bounce guard on top:
    a repeat of the exact input that last resolved a student is swallowed
    until `reset()`.
    """

    def __init__(
        self,
        roster: RosterRepository,
        ledger: AttendanceLedger,
        *,
        router: Optional[DispatchRouter] = None,
        outbound: Optional[OutboundQueue] = None,
        settings: Optional[SettingsStore] = None,
        lock: Optional[threading.RLock] = None,
        code_length: int = PRIMARY_CODE_LENGTH,
    ):
        self._roster = roster
        self._ledger = ledger
        self._router = router
        self._outbound = outbound
        self._settings = settings
        self._lock = lock or threading.RLock()
        self._code_length = int(code_length)
        self._last_student: Optional[Student] = None
        self._last_input: Optional[str] = None

    def reset(self) -> None:
        """Operator pressed "next": forget the previous result."""
        with self._lock:
            self._last_student = None
            self._last_input = None

    def feed_manual_input(self, text: str, *, now: Optional[datetime] = None) -> Optional[ScanResult]:
        """Keystroke path: resolves as soon as the text reaches the code length."""
        if len(text or "") != self._code_length:
            return None
        return self.scan(text, now=now)

    def submit_manual(self, text: str, *, now: Optional[datetime] = None) -> Optional[ScanResult]:
        if not text or not text.strip():
            return None
        return self.scan(text, now=now)

    def scan(self, decoded_text: str, *, now: Optional[datetime] = None) -> ScanResult:
        """Scanner entry point: drops a repeat of the last resolved input until `reset()`."""
        code = (decoded_text or "").strip()
        with self._lock:
            if self._last_input is not None and code == self._last_input:
                return ScanResult(outcome=ScanOutcome.IGNORED, code=code, message="", student=self._last_student)
            return self.resolve(code, now=now)

    def resolve(self, decoded_text: str, *, now: Optional[datetime] = None) -> ScanResult:
        code = (decoded_text or "").strip()
        with self._lock:
            now = now or now_local()
            try:
                student = self._lookup(code)
            except UnknownCodeError as e:
                logger.info("unknown code scanned: %r", code)
                return ScanResult(outcome=ScanOutcome.UNKNOWN, code=code, message=str(e))

            existing = self._ledger.get_for_student_and_date(student.student_id, now.date())
            if existing is not None:
                self._remember(student, code)
                return ScanResult(
                    outcome=ScanOutcome.DUPLICATE,
                    code=code,
                    message=f"{student.name} sudah tercatat hadir.",
                    student=student,
                    record=existing,
                )

            record = AttendanceRecord(
                record_id=new_record_id(),
                student_id=student.student_id,
                timestamp=now,
                status=AttendanceStatus.PRESENT,
            )
            self._ledger.append(record)
            self._remember(student, code)
            logger.info("attendance recorded for %s at %s", student.student_id, now.isoformat(timespec="seconds"))

        self._trigger_notification(student, now)
        return ScanResult(
            outcome=ScanOutcome.RECORDED,
            code=code,
            message="Verifikasi Berhasil",
            student=student,
            record=record,
        )

    def _remember(self, student: Student, code: str) -> None:
        self._last_student = student
        self._last_input = code

    def _lookup(self, code: str) -> Student:
        student = self._roster.find_by_key(code)
        if student is None:
            raise UnknownCodeError(code)
        return student

    def _trigger_notification(self, student: Student, arrived_at: datetime) -> None:
        if self._router is None or self._outbound is None or self._settings is None:
            return
        context = self._settings.current()
        if not context.wants_auto_send or not student.guardian_phone:
            return
        self._outbound.submit(
            partial(self._router.dispatch, student, arrived_at, is_automatic=True, context=context)
        )
