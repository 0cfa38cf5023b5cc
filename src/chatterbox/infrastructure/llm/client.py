"""LLM client wrapper."""

import asyncio
import logging
from typing import Any

import litellm
from litellm.exceptions import (
    APIConnectionError,
    AuthenticationError,
    RateLimitError,
    Timeout,
)

from chatterbox.config import LLMConfig
from chatterbox.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """LiteLLM wrapper client.

    This class provides a simplified interface to LiteLLM,
    applying configuration and handling errors. LiteLLM's own retries
    are disabled; retrying is the caller's decision.
    """

    def __init__(self, config: LLMConfig, timeout: float = 30.0) -> None:
        """Initialize the client.

        Args:
            config: LLM configuration (model, api_key, max_tokens, etc.).
            timeout: Default request timeout in seconds.
        """
        self._config = config
        self._timeout = timeout

    async def complete(
        self,
        messages: list[dict[str, str]],
        timeout: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Execute chat completion.

        Args:
            messages: OpenAI-format message list.
                [{"role": "system", "content": "..."}, ...]
            timeout: Request timeout in seconds (overrides the default).
            **kwargs: Additional parameters (override config).

        Returns:
            Generated text.

        Raises:
            LLMAuthenticationError: Invalid API key.
            LLMRateLimitError: Rate limit exceeded.
            LLMTimeoutError: Request timed out.
            LLMConnectionError: No response was received.
            LLMError: Other API errors or a malformed response.
        """
        params: dict[str, Any] = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "api_key": self._config.api_key,
            "messages": messages,
            "timeout": timeout if timeout is not None else self._timeout,
            "num_retries": 0,
        }
        if self._config.api_base:
            params["api_base"] = self._config.api_base
        params.update(kwargs)

        logger.debug("LLM request: model=%s", params["model"])

        try:
            response = await litellm.acompletion(**params)
        except AuthenticationError as e:
            logger.error("LLM authentication error: %s", e)
            raise LLMAuthenticationError(str(e)) from e
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded: %s", e)
            raise LLMRateLimitError(str(e)) from e
        except (Timeout, asyncio.TimeoutError) as e:
            logger.warning("LLM request timed out: %s", e)
            raise LLMTimeoutError(str(e)) from e
        except APIConnectionError as e:
            logger.warning("LLM connection error: %s", e)
            raise LLMConnectionError(str(e)) from e
        except Exception as e:
            logger.error("LLM error: %s", e)
            raise LLMError(str(e)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise LLMError(f"Malformed LLM response: {e}") from e
        if content is None:
            raise LLMError("LLM response has no content")

        logger.debug("LLM response received")
        return content
