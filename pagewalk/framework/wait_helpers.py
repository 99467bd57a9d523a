# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Polling primitives shared by element probes, collections and pagination.
#
# Key Features:
#   - poll_until: fixed-interval polling bounded by a deadline
#   - poll_until_async: the same loop as a cancellable awaitable
#   - WaitPolicy: immutable first/other element timeouts for collections
#
# A timeout is an expected outcome and is reported as False, never raised.
# Exceptions raised by the polled condition propagate unmodified.
#
# Usage:
#   found = poll_until(lambda: engine.is_present(ref), timeout_seconds=5)
#   policy = WaitPolicy.from_config()
#
# ================================================================================

import asyncio
import time
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from pagewalk.common import get_int_config


DEFAULT_POLL_INTERVAL_MS = 100


def poll_until(
    condition: Callable[[], bool],
    timeout_seconds: float,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    description: str = "",
) -> bool:
    """
    Poll ``condition`` until it returns a truthy value or the timeout elapses.

    The condition is always evaluated at least once, so a zero timeout is an
    immediate read.

    Args:
        condition: Zero-argument callable returning a truthy value on success
        timeout_seconds: Upper bound of the wait in seconds
        poll_interval_ms: Sleep between two evaluations in milliseconds
        description: Optional text for trace logging

    Returns:
        True if the condition became true within the timeout, False otherwise
    """
    interval = max(poll_interval_ms, 1) / 1000.0
    deadline = time.monotonic() + max(timeout_seconds, 0)

    while True:
        if condition():
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            if description:
                logger.trace(f"Timed out after {timeout_seconds}s waiting for: {description}")
            return False
        time.sleep(min(interval, remaining))


async def poll_until_async(
    condition: Callable[[], bool],
    timeout_seconds: float,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    description: str = "",
) -> bool:
    """
    Awaitable variant of :func:`poll_until`.

    Sleeping happens through ``asyncio.sleep`` so the wait can be cancelled
    by the host event loop between two evaluations.
    """
    interval = max(poll_interval_ms, 1) / 1000.0
    deadline = time.monotonic() + max(timeout_seconds, 0)

    while True:
        if condition():
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            if description:
                logger.trace(f"Timed out after {timeout_seconds}s waiting for: {description}")
            return False
        await asyncio.sleep(min(interval, remaining))


@dataclass(frozen=True)
class WaitPolicy:
    """
    Timeouts applied while walking a collection.

    Attributes:
        first_timeout_seconds: Wait for the first element (initial render)
        other_timeout_seconds: Wait for every following sibling
        poll_interval_ms: Sleep between two probes

    Both timeouts are clamped to at least one second.
    """
    first_timeout_seconds: int = 10
    other_timeout_seconds: int = 1
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    def __post_init__(self) -> None:
        object.__setattr__(self, "first_timeout_seconds", max(1, int(self.first_timeout_seconds)))
        object.__setattr__(self, "other_timeout_seconds", max(1, int(self.other_timeout_seconds)))
        object.__setattr__(self, "poll_interval_ms", max(1, int(self.poll_interval_ms)))

    @classmethod
    def from_config(cls) -> "WaitPolicy":
        """Build a policy from the ``wait.*`` configuration keys."""
        return cls(
            first_timeout_seconds=get_int_config("wait.first_timeout", 10),
            other_timeout_seconds=get_int_config("wait.other_timeout", 1),
            poll_interval_ms=get_int_config("wait.poll_interval_ms", DEFAULT_POLL_INTERVAL_MS),
        )

    def timeout_for(self, index: int) -> int:
        """Timeout for the element at ``index``."""
        return self.first_timeout_seconds if index == 0 else self.other_timeout_seconds


__all__ = [
    "DEFAULT_POLL_INTERVAL_MS",
    "WaitPolicy",
    "poll_until",
    "poll_until_async",
]
