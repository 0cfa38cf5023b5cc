"""LLM-related exceptions."""


class LLMError(Exception):
    """Base exception for LLM-related errors."""


class LLMRateLimitError(LLMError):
    """Rate limit exceeded error (HTTP 429)."""


class LLMAuthenticationError(LLMError):
    """Authentication error (invalid API key, etc.)."""


class LLMTransientError(LLMError):
    """No HTTP response was received; the request may be retried."""


class LLMTimeoutError(LLMTransientError):
    """The request timed out."""


class LLMConnectionError(LLMTransientError):
    """The connection failed, was reset or was aborted."""
