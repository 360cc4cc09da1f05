from __future__ import annotations

import json
from datetime import date, datetime

import httpx

from siabdul.attendance.memory_ledger import new_record_id
from siabdul.attendance.model import AttendanceRecord
from siabdul.core.enums import AttendanceStatus
from siabdul.reports.service import ReportService
from siabdul.summarizer.service import (
    FAILED_TEXT,
    NOT_CONFIGURED_TEXT,
    QUOTA_EXCEEDED_TEXT,
    ReportSummaryService,
)

DAY = date(2025, 1, 6)


def _service(roster, ledger, lock, handler, *, api_key="key", sleeps=None):
    calls = []

    def record(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(record))
    svc = ReportSummaryService(
        ReportService(roster, ledger, lock=lock),
        client,
        api_key=api_key,
        sleep=(sleeps if sleeps is not None else []).append,
    )
    return svc, calls


def _ok(text: str):
    return lambda request: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def test_missing_key_returns_fixed_text_without_call(roster, ledger, lock):
    svc, calls = _service(roster, ledger, lock, _ok("x"), api_key="")

    result = svc.generate(DAY)

    assert result.status == "not_configured"
    assert result.text == NOT_CONFIGURED_TEXT
    assert calls == []


def test_success_returns_model_text_and_sends_payload(roster, ledger, lock):
    ledger.append(
        AttendanceRecord(new_record_id(), "STU-001", datetime(2025, 1, 6, 7, 0), AttendanceStatus.PRESENT)
    )
    svc, calls = _service(roster, ledger, lock, _ok("## Laporan"))

    result = svc.generate(DAY)

    assert result.ok
    assert result.text == "## Laporan"
    request = calls[0]
    assert request.headers["x-goog-api-key"] == "key"
    assert ":generateContent" in str(request.url)
    prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
    assert '"presentCount": 1' in prompt
    assert "Ahmad Santoso" in prompt


def test_quota_exhaustion_after_retries(roster, ledger, lock):
    sleeps = []
    svc, calls = _service(roster, ledger, lock, lambda r: httpx.Response(429, text="Too Many Requests"), sleeps=sleeps)

    result = svc.generate(DAY)

    assert result.status == "quota_exceeded"
    assert result.text == QUOTA_EXCEEDED_TEXT
    assert len(calls) == 4
    assert sleeps == [1.0, 2.0, 4.0]


def test_resource_exhausted_body_counts_as_rate_limit(roster, ledger, lock):
    body = {"error": {"code": 403, "status": "RESOURCE_EXHAUSTED", "message": "limit"}}
    responses = [httpx.Response(403, json=body), _ok("done")(None)]
    svc, calls = _service(roster, ledger, lock, lambda r: responses.pop(0))

    result = svc.generate(DAY)

    assert result.ok
    assert len(calls) == 2


def test_server_error_is_generic_failure_without_retry(roster, ledger, lock):
    svc, calls = _service(roster, ledger, lock, lambda r: httpx.Response(500, json={"error": {"status": "INTERNAL"}}))

    result = svc.generate(DAY)

    assert result.status == "failed"
    assert result.text == FAILED_TEXT
    assert len(calls) == 1


def test_empty_answer(roster, ledger, lock):
    svc, _ = _service(roster, ledger, lock, _ok(""))

    assert svc.generate(DAY).text == "No report generated."
