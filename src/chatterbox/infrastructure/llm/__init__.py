"""LLM integration."""

from chatterbox.infrastructure.llm.client import LLMClient
from chatterbox.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransientError,
)
from chatterbox.infrastructure.llm.gateway import CompletionGateway
from chatterbox.infrastructure.llm.retry import (
    RetryPolicy,
    is_transient_error,
    retry_async,
)
from chatterbox.infrastructure.llm.topic_inference import LLMTopicInferrer

__all__ = [
    "CompletionGateway",
    "LLMAuthenticationError",
    "LLMClient",
    "LLMConnectionError",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMTopicInferrer",
    "LLMTransientError",
    "RetryPolicy",
    "is_transient_error",
    "retry_async",
]
