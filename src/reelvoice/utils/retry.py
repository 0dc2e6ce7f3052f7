"""Retry decorators using tenacity."""

from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


def retry_transient(
    exceptions: tuple[type[BaseException], ...] = (TimeoutError, ConnectionError),
    *,
    max_attempts: int = 3,
    max_wait: float = 10,
):
    """Retry decorator for transport-level failures with exponential backoff.

    Works on coroutine functions as well as plain ones.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        reraise=True,
    )
