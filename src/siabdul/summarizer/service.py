from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable

import httpx

from ..app_logger import get_logger
from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BASE_DELAY_SECONDS
from ..core.exceptions import RateLimitError
from ..reports.service import ReportService
from .retry import RATE_LIMIT_STATUS, RATE_LIMIT_STATUS_CODE, is_rate_limit, with_retry

logger = get_logger("summarizer.service")

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

NOT_CONFIGURED_TEXT = "API Key not configured. Unable to generate smart report."
QUOTA_EXCEEDED_TEXT = "Unable to generate report: API Quota Exceeded. Please try again later."
FAILED_TEXT = "Failed to generate report due to an error."
EMPTY_TEXT = "No report generated."

PROMPT_TEMPLATE = """
You are a helpful school administrator assistant.
Analyze the following daily attendance data and generate a professional, concise summary report in Markdown format.

Data:
{data}

The report should include:
1. A headline with the date.
2. A brief statistical summary (Attendance Rate).
3. A list of absent students (if any) with a polite reminder suggestion for the teacher to follow up.
4. An encouraging closing remark.

Use formatting like bolding and bullet points to make it readable.
"""


@dataclass(frozen=True)
class SummaryResult:
    status: str  # ok | not_configured | quota_exceeded | failed
    text: str

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class ReportSummaryService:
    """Daily report summary written by a hosted LLM (Gemini REST API)."""

    def __init__(
        self,
        reports: ReportService,
        client: httpx.Client,
        *,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        api_url: str = DEFAULT_API_URL,
        max_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        base_delay: float = DEFAULT_RETRY_BASE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._reports = reports
        self._client = client
        self._api_key = api_key
        self._model = model
        self._api_url = api_url
        self._max_attempts = int(max_attempts)
        self._base_delay = float(base_delay)
        self._sleep = sleep

    def generate(self, work_date: date) -> SummaryResult:
        if not self._api_key:
            return SummaryResult(status="not_configured", text=NOT_CONFIGURED_TEXT)

        payload = self._reports.summary_payload(work_date)
        prompt = PROMPT_TEMPLATE.format(data=json.dumps(payload, indent=2, ensure_ascii=False))

        try:
            text = with_retry(
                lambda: self._call_model(prompt),
                max_attempts=self._max_attempts,
                base_delay=self._base_delay,
                sleep=self._sleep,
            )
        except (RateLimitError, httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("report summary failed: %s", e)
            if is_rate_limit(e):
                return SummaryResult(status="quota_exceeded", text=QUOTA_EXCEEDED_TEXT)
            return SummaryResult(status="failed", text=FAILED_TEXT)

        return SummaryResult(status="ok", text=text or EMPTY_TEXT)

    def _call_model(self, prompt: str) -> str:
        response = self._client.post(
            self._api_url.format(model=self._model),
            headers={"x-goog-api-key": self._api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
        )

        if response.status_code == RATE_LIMIT_STATUS_CODE:
            raise RateLimitError(f"HTTP 429 from model API: {response.text[:200]}")
        if response.is_error:
            error = _error_body(response)
            if error.get("status") == RATE_LIMIT_STATUS:
                raise RateLimitError(str(error.get("message") or RATE_LIMIT_STATUS), status=RATE_LIMIT_STATUS)
            response.raise_for_status()

        data = response.json()
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(p.get("text", "") for p in parts)


def _error_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    error = body.get("error") if isinstance(body, dict) else None
    return error if isinstance(error, dict) else {}
