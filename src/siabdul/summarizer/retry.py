from __future__ import annotations

import time
from typing import Callable, TypeVar

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..app_logger import get_logger
from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BASE_DELAY_SECONDS
from ..core.exceptions import RateLimitError

logger = get_logger("summarizer.retry")

T = TypeVar("T")

RATE_LIMIT_STATUS_CODE = 429
RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"
_RATE_LIMIT_MARKERS = ("429", "quota", RATE_LIMIT_STATUS)


def is_rate_limit(exc: BaseException) -> bool:
    """True when the failure looks like a 429 / quota refusal."""
    if isinstance(exc, RateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code == RATE_LIMIT_STATUS_CODE:
        return True
    for attr in ("status_code", "code"):
        if getattr(exc, attr, None) == RATE_LIMIT_STATUS_CODE:
            return True
    if getattr(exc, "status", None) == RATE_LIMIT_STATUS:
        return True
    message = str(exc)
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


def with_retry(
    operation: Callable[[], T],
    *,
    max_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run `operation`, retrying rate-limit failures up to `max_attempts` more times.

    Waits base_delay * 2 ** (n - 1) before the n-th retry. Anything that is not
    a rate limit propagates at once; the last error propagates when retries run out.
    """

    def _log_retry(retry_state) -> None:
        logger.warning(
            "rate limited, retrying in %.1fs (attempt %d/%d)",
            retry_state.next_action.sleep,
            retry_state.attempt_number,
            max_attempts,
        )

    retrying = Retrying(
        retry=retry_if_exception(is_rate_limit),
        stop=stop_after_attempt(max_attempts + 1),
        wait=wait_exponential(multiplier=base_delay, exp_base=2),
        sleep=sleep,
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(operation)
