"""Retry with exponential backoff for remote provider calls.

This module wraps provider calls in tenacity's AsyncRetrying. Only
ProviderErrors flagged retryable are retried; ValidationError,
CancellationError and non-retryable client errors propagate on the first
failure. The delay before retry n is ``base * 2^(n-1)`` plus a uniform
jitter in ``[0, jitter_max]``.
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (RetryError, before_sleep_log, retry_if_exception,
                      stop_after_attempt, wait_exponential, wait_random)
from tenacity.asyncio import AsyncRetrying

from venture_assessment.exceptions.provider_error import ProviderError
from venture_assessment.exceptions.retry_error import RetryExhaustedError
from venture_assessment.utils.cancellation import (CancellationToken,
                                                   cancellable_sleep)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exception: BaseException) -> bool:
    """Return True for transient provider failures."""
    return isinstance(exception, ProviderError) and exception.retryable


def backoff_wait(base_delay: float, jitter_max: float) -> Any:
    """Build the tenacity wait strategy for the given base and jitter.
    
    Consecutive exponential steps differ by at least ``base_delay``, so any
    jitter strictly below the base keeps the delays strictly increasing.
    """
    return wait_exponential(multiplier=base_delay, exp_base=2) + wait_random(0, jitter_max)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    base_delay: float,
    jitter_max: float,
    cancellation: CancellationToken | None = None,
    label: str = "provider call",
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> T:
    """Run an async operation with bounded retries.
    
    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        max_attempts: Maximum number of attempts (including the first)
        base_delay: Backoff base delay in seconds
        jitter_max: Upper bound of the random jitter in seconds
        cancellation: Optional token observed before each attempt and
            during backoff delays
        label: Name used in log messages
        sleep: Optional sleep coroutine; defaults to a cancellable sleep
    
    Returns:
        The operation's result
    
    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error
        CancellationError: If cancellation was requested
        BaseAssessmentError: Any non-retryable error, unchanged
    """
    if sleep is None:
        async def sleep(seconds: float) -> None:
            await cancellable_sleep(seconds, cancellation)
    
    attempts = 0
    
    async def _attempt() -> T:
        nonlocal attempts
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        attempts += 1
        logger.debug(f"{label}: attempt {attempts}/{max_attempts}")
        return await operation()
    
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=backoff_wait(base_delay, jitter_max),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=sleep,
        ):
            with attempt:
                return await _attempt()
    except RetryError as e:
        last = e.last_attempt.exception()
        logger.error(f"{label} failed after {attempts} attempts: {last}")
        raise RetryExhaustedError(
            f"{label} failed after {attempts} attempts",
            cause=last,
            attempts=attempts,
        ) from last
    
    # AsyncRetrying always returns or raises above
    raise RetryExhaustedError(f"{label} made no attempts", attempts=attempts)
