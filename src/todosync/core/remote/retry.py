"""
Retry policy with exponential backoff for remote requests.

Transient failures (5xx responses, timeouts, connection and other transport
errors) are retried with an exponentially growing delay; anything else stops
the loop immediately.

Example:
    >>> policy = RetryPolicy()
    >>> [policy.calculate_delay(n) for n in range(7)]
    [0.1, 0.2, 0.4, 0.8, 1.6, 3.2, 5.0]

Configuration:
    - Default base delay: 0.1 seconds
    - Default multiplier: 2.0x per retry
    - Default ceiling: 5.0 seconds on any single wait
    - Default retries: unlimited (until success or a non-transient error)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class RetryPolicy:
    """
    Configuration for retry behavior.

    Attributes:
        base_delay: Delay in seconds before the first retry (default: 0.1)
        multiplier: Exponential backoff multiplier (default: 2.0)
        max_delay: Ceiling on any single wait in seconds (default: 5.0)
        max_retries: Maximum number of retries, None for no limit (default: None)
    """

    def __init__(
        self,
        base_delay: float = 0.1,
        multiplier: float = 2.0,
        max_delay: float = 5.0,
        max_retries: int | None = None,
    ) -> None:
        """
        Initialize retry configuration.

        Raises:
            ValueError: If parameters are invalid
        """
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if max_delay <= 0:
            raise ValueError("max_delay must be positive")
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be non-negative")

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay
        self.max_retries = max_retries

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate the wait before retry number ``attempt`` (0-indexed).

        delay = min(max_delay, base_delay * multiplier ** attempt)
        """
        # Float pow overflows long before attempt numbers run out
        try:
            delay = self.base_delay * (self.multiplier**attempt)
        except OverflowError:
            return self.max_delay
        return round(min(self.max_delay, delay), 6)

    def allows_retry(self, retries_done: int) -> bool:
        """Whether another retry is permitted after ``retries_done`` retries."""
        return self.max_retries is None or retries_done < self.max_retries


def is_transient_error(exception: BaseException) -> bool:
    """
    Determine if an exception represents a transient, retryable failure.

    Retryable:
    - 5xx server errors
    - Timeouts, connection errors and other transport-level failures

    Not retryable:
    - 4xx client errors (404, 401, 400, ...)
    - Decoding/validation failures and any other exception
    """
    # HTTPStatusError is checked first: only server-side statuses are transient
    if isinstance(exception, httpx.HTTPStatusError):
        return 500 <= exception.response.status_code < 600

    if isinstance(exception, httpx.TransportError):
        return True

    return False


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    description: str = "request",
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """
    Await ``operation`` until it succeeds or fails non-transiently.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Backoff configuration
        description: Label used in log messages
        sleep: Coroutine used to wait between attempts

    Returns:
        The operation's result

    Raises:
        Exception: The last exception raised by ``operation`` once it is
            non-transient or no retries are left
    """
    retries = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if not is_transient_error(e):
                logger.debug(f"{description}: Non-retryable error on attempt {retries + 1}: {e}")
                raise

            if not policy.allows_retry(retries):
                logger.warning(f"{description}: Max retries ({policy.max_retries}) exceeded: {e}")
                raise

            delay = policy.calculate_delay(retries)
            retries += 1
            logger.info(f"{description}: Retry attempt {retries} after {delay:.2f}s due to: {e}")
            await sleep(delay)


__all__ = [
    "RetryPolicy",
    "is_transient_error",
    "retry_async",
]
