"""Backoff helpers for FCMClient: Retry-After parsing and a hint-aware wait."""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from tenacity import RetryCallState
from tenacity.wait import wait_base


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """
    Parse a Retry-After header value.

    Args:
        value: Header value, either integer delta-seconds or an HTTP-date
        now: Reference time for HTTP-dates (defaults to the current UTC time)

    Returns:
        Seconds to wait (never negative), or None if absent or unparseable
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    # delta-seconds is a non-negative integer; anything else must be an HTTP-date
    if value.isascii() and value.isdigit():
        seconds = float(value)
        return seconds if math.isfinite(seconds) else None

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


class wait_retry_after(wait_base):
    """Wait strategy that honors a provider Retry-After hint.

    Delegates to ``fallback`` for the computed backoff. If the failed
    attempt raised an error carrying ``retry_after`` larger than that
    backoff, the hint is used instead.
    """

    def __init__(self, fallback: wait_base) -> None:
        self.fallback = fallback

    def __call__(self, retry_state: RetryCallState) -> float:
        delay = self.fallback(retry_state)
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            hint = getattr(outcome.exception(), "retry_after", None)
            if hint is not None and hint > delay:
                return hint
        return delay
