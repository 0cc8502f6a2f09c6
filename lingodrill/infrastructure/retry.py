"""Bounded retries for provider calls, built on tenacity."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_WAIT = 1.0  # seconds
DEFAULT_MAX_WAIT = 8.0  # seconds
DEFAULT_JITTER = 0.5  # seconds


class TransientError(Exception):
    """A failure worth retrying (network blip, temporary unavailability)."""


DEFAULT_RETRYABLE: tuple[type[BaseException], ...] = (
    TransientError,
    ConnectionError,
    TimeoutError,
)


async def retry_operation(
    operation: Callable[..., Awaitable[T]],
    *args,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_wait: float = DEFAULT_INITIAL_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
    retryable_exceptions: tuple[type[BaseException], ...] = DEFAULT_RETRYABLE,
    on_retry: Callable[[int, BaseException], None] | None = None,
    label: str | None = None,
    **kwargs,
) -> T:
    """Await operation(*args, **kwargs), retrying transient failures.

    Waits grow as min(initial * 2^n, max) + random(0, jitter), so with a
    1s initial wait the second attempt starts about 1s after the first and
    the third about 2s after that.

    Args:
        operation: Async callable to run
        max_attempts: Total attempts including the first one
        initial_wait: First backoff in seconds
        max_wait: Backoff ceiling in seconds
        retryable_exceptions: Exception types that trigger another attempt
        on_retry: Called with (failed attempt number, exception) before each wait
        label: Name used in log lines (defaults to the operation's __name__)

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The last retryable error once attempts run out, or the
            first non-retryable one unchanged
    """
    name = label or getattr(operation, "__name__", "operation")

    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{name} failed on attempt {retry_state.attempt_number}/{max_attempts}: {error}"
        )
        if on_retry is not None and error is not None:
            on_retry(retry_state.attempt_number, error)

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial_wait, max=max_wait)
        + wait_random(0, DEFAULT_JITTER),
        retry=retry_if_exception_type(retryable_exceptions),
        before_sleep=before_sleep,
        reraise=True,
    ):
        with attempt:
            return await operation(*args, **kwargs)

    raise RuntimeError(f"{name} made no attempts")
