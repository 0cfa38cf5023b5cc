"""Completion gateway: LLMClient plus bounded retry."""

import asyncio
import dataclasses
import logging

from chatterbox.infrastructure.llm.client import LLMClient
from chatterbox.infrastructure.llm.retry import RetryPolicy, Sleep, retry_async

logger = logging.getLogger(__name__)


class CompletionGateway:
    """Executes completions with exponential backoff on transient errors.

    This class implements the CompletionService protocol. It never returns
    placeholder text: either the model's reply or an LLMError.
    """

    def __init__(
        self,
        client: LLMClient,
        policy: RetryPolicy | None = None,
        timeout_seconds: float = 30.0,
        *,
        name: str = "",
        debug_llm_messages: bool = False,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the gateway.

        Args:
            client: LLMClient instance.
            policy: Retry policy. Defaults to 3 retries from 1 second.
            timeout_seconds: Per-request timeout.
            name: Bot name used in log messages.
            debug_llm_messages: If True, log LLM messages at INFO level.
            sleep: Awaitable sleep used between retries.
        """
        self._client = client
        self._policy = policy or RetryPolicy()
        self._timeout = timeout_seconds
        self._name = name
        self._debug_llm_messages = debug_llm_messages
        self._sleep = sleep

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_retries: int | None = None,
        timeout: float | None = None,
    ) -> str:
        """Get a completion for the messages.

        Args:
            messages: OpenAI-format message list.
            max_retries: Overrides the policy's retry count.
            timeout: Overrides the per-request timeout (seconds).

        Returns:
            Reply text.

        Raises:
            LLMError: Terminal error, or the last transient error once
                retries are exhausted.
        """
        policy = self._policy
        if max_retries is not None:
            policy = dataclasses.replace(policy, max_retries=max_retries)
        request_timeout = timeout if timeout is not None else self._timeout

        if self._should_log():
            self._log_messages(messages)

        response = await retry_async(
            lambda: self._client.complete(messages, timeout=request_timeout),
            policy,
            sleep=self._sleep,
            label=f"[{self._name}] completion",
        )

        if self._should_log():
            self._log_response(response)

        return response

    def _should_log(self) -> bool:
        """Check if logging should occur."""
        return self._debug_llm_messages or logger.isEnabledFor(logging.DEBUG)

    def _log_messages(self, messages: list[dict[str, str]]) -> None:
        """Log LLM request messages."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Request Messages [%s] ===", self._name)
        for i, msg in enumerate(messages):
            log_func("[%d] role=%s", i, msg.get("role", "unknown"))
            log_func("    content: %s", msg.get("content", ""))
        log_func("=== End of Messages ===")

    def _log_response(self, response: str) -> None:
        """Log LLM response."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Response [%s] ===", self._name)
        log_func("response: %s", response)
        log_func("=== End of Response ===")
