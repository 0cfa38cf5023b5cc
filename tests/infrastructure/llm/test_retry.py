"""Tests for retry_async and RetryPolicy."""

from unittest.mock import AsyncMock

import pytest

from chatterbox.infrastructure.llm import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    RetryPolicy,
    is_transient_error,
    retry_async,
)


@pytest.fixture
def sleep() -> AsyncMock:
    """Create a recording sleep."""
    return AsyncMock()


def sleep_delays(sleep: AsyncMock) -> list[float]:
    return [call.args[0] for call in sleep.await_args_list]


class TestRetryPolicy:
    """RetryPolicy tests."""

    def test_delays_double(self) -> None:
        """Test that delays grow exponentially from the base."""
        policy = RetryPolicy(backoff_base_seconds=1.0)

        assert [policy.delay_for(i) for i in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_is_transient_error(self) -> None:
        """Test which errors count as transient."""
        assert is_transient_error(LLMTimeoutError("t")) is True
        assert is_transient_error(LLMConnectionError("c")) is True
        assert is_transient_error(LLMRateLimitError("r")) is False
        assert is_transient_error(LLMAuthenticationError("a")) is False
        assert is_transient_error(LLMError("e")) is False
        assert is_transient_error(ValueError("v")) is False


class TestRetryAsync:
    """retry_async tests."""

    async def test_success_first_try(self, sleep: AsyncMock) -> None:
        """Test that a successful call is not retried."""
        operation = AsyncMock(return_value="ok")

        result = await retry_async(operation, RetryPolicy(), sleep=sleep)

        assert result == "ok"
        assert operation.await_count == 1
        sleep.assert_not_awaited()

    async def test_succeeds_on_fourth_attempt(self, sleep: AsyncMock) -> None:
        """Test three transient failures then success with 1s, 2s, 4s waits."""
        operation = AsyncMock(
            side_effect=[
                LLMTimeoutError("t"),
                LLMConnectionError("reset"),
                LLMTimeoutError("t"),
                "finally",
            ]
        )

        result = await retry_async(operation, RetryPolicy(max_retries=3), sleep=sleep)

        assert result == "finally"
        assert operation.await_count == 4
        assert sleep_delays(sleep) == [1.0, 2.0, 4.0]

    async def test_exhausted_raises_last_error(self, sleep: AsyncMock) -> None:
        """Test that the last transient error surfaces after max retries."""
        errors = [LLMTimeoutError(f"t{i}") for i in range(4)]
        operation = AsyncMock(side_effect=errors)

        with pytest.raises(LLMTimeoutError) as exc_info:
            await retry_async(operation, RetryPolicy(max_retries=3), sleep=sleep)

        assert exc_info.value is errors[-1]
        assert operation.await_count == 4
        assert sleep_delays(sleep) == [1.0, 2.0, 4.0]

    async def test_terminal_error_not_retried(self, sleep: AsyncMock) -> None:
        """Test that an error with an HTTP status is raised immediately."""
        operation = AsyncMock(side_effect=LLMRateLimitError("429"))

        with pytest.raises(LLMRateLimitError):
            await retry_async(operation, RetryPolicy(max_retries=3), sleep=sleep)

        assert operation.await_count == 1
        sleep.assert_not_awaited()

    async def test_zero_retries(self, sleep: AsyncMock) -> None:
        """Test that max_retries=0 means a single attempt."""
        operation = AsyncMock(side_effect=LLMTimeoutError("t"))

        with pytest.raises(LLMTimeoutError):
            await retry_async(operation, RetryPolicy(max_retries=0), sleep=sleep)

        assert operation.await_count == 1
        sleep.assert_not_awaited()

    async def test_custom_backoff_base(self, sleep: AsyncMock) -> None:
        """Test that the base delay is configurable."""
        operation = AsyncMock(side_effect=[LLMTimeoutError("t"), "ok"])

        await retry_async(
            operation, RetryPolicy(backoff_base_seconds=0.5), sleep=sleep
        )

        assert sleep_delays(sleep) == [0.5]
