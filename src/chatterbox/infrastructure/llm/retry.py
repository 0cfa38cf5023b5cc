"""Retry policy and executor for transient failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from chatterbox.infrastructure.llm.exceptions import LLMTransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


def is_transient_error(error: BaseException) -> bool:
    """Check if an error means no HTTP response was received.

    Timeouts, resets and aborted connections are retryable. Anything that
    carries an HTTP status (including 429 and 5xx) is terminal.
    """
    return isinstance(error, LLMTransientError)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff policy.

    Attributes:
        max_retries: Retries allowed after the first attempt.
        backoff_base_seconds: Delay before the first retry; doubles each time.
        is_retryable: Classifies an error as retryable.
    """

    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    is_retryable: Callable[[BaseException], bool] = is_transient_error

    def delay_for(self, attempt: int) -> float:
        """Delay before retrying after failed attempt number `attempt` (0-based)."""
        return self.backoff_base_seconds * (2**attempt)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Run an async operation, retrying retryable failures with backoff.

    Args:
        operation: Zero-argument coroutine factory.
        policy: Retry policy.
        sleep: Awaitable sleep function.
        label: Name used in log messages.

    Returns:
        The operation's result.

    Raises:
        Exception: A non-retryable error immediately, or the last retryable
            error once retries are exhausted.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if not policy.is_retryable(e):
                raise
            if attempt >= policy.max_retries:
                logger.error(
                    "%s failed after %d retries: %s", label, policy.max_retries, e
                )
                raise
            delay = policy.delay_for(attempt)
            attempt += 1
            logger.warning(
                "%s: transient error, retrying in %.1fs (%d/%d): %s",
                label,
                delay,
                attempt,
                policy.max_retries,
                e,
            )
            await sleep(delay)
