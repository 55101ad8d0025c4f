"""Cooperative cancellation for provider calls and backoff delays.

A single CancellationToken is shared by a pipeline run. It is observed at
the in-flight network call (via race_with_deadline), during backoff sleeps
(via cancellable_sleep), and before each phase starts.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from venture_assessment.exceptions.cancellation_error import CancellationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal backed by an asyncio.Event."""
    
    def __init__(self) -> None:
        self._event = asyncio.Event()
    
    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        if not self._event.is_set():
            logger.info("Cancellation requested")
            self._event.set()
    
    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
    
    def raise_if_cancelled(self) -> None:
        """Raise CancellationError if cancellation was requested."""
        if self._event.is_set():
            raise CancellationError()
    
    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()


async def race_with_deadline(
    awaitable: Awaitable[T],
    token: CancellationToken | None,
    timeout: float,
) -> T:
    """Await a call racing it against a deadline and a cancellation token.
    
    Whichever finishes first wins; the losers are cancelled and awaited so
    no task is left running. A call that completed wins over a deadline or
    cancellation observed in the same iteration.
    
    Args:
        awaitable: The call to run
        token: Optional cancellation token
        timeout: Deadline in seconds
    
    Returns:
        The call's result
    
    Raises:
        CancellationError: If the token fired first
        asyncio.TimeoutError: If the deadline passed first
    """
    if token is not None and token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise CancellationError()
    
    call = asyncio.ensure_future(awaitable)
    waiters = {call}
    watcher = None
    if token is not None:
        watcher = asyncio.ensure_future(token.wait())
        waiters.add(watcher)
    
    try:
        done, pending = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        for task in waiters:
            task.cancel()
        await asyncio.gather(*waiters, return_exceptions=True)
        raise
    
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    
    if call in done:
        return call.result()
    if watcher is not None and watcher in done:
        raise CancellationError()
    raise asyncio.TimeoutError(f"Call exceeded deadline of {timeout}s")


async def cancellable_sleep(seconds: float, token: CancellationToken | None = None) -> None:
    """Sleep for the given duration, waking early with CancellationError.
    
    Args:
        seconds: Delay in seconds
        token: Optional cancellation token
    
    Raises:
        CancellationError: If the token fired before or during the delay
    """
    if token is None:
        await asyncio.sleep(seconds)
        return
    
    token.raise_if_cancelled()
    try:
        await asyncio.wait_for(token.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return
    raise CancellationError()
