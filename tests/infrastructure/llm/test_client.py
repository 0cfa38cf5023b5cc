"""Tests for LLMClient."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import (
    APIConnectionError,
    AuthenticationError,
    RateLimitError,
    Timeout,
)

from chatterbox.config import LLMConfig
from chatterbox.infrastructure.llm import (
    LLMAuthenticationError,
    LLMClient,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransientError,
)

MESSAGES = [{"role": "user", "content": "Hello"}]


class TestLLMClient:
    """LLMClient tests."""

    @pytest.fixture
    def config(self) -> LLMConfig:
        """Create LLM config."""
        return LLMConfig(
            api_key="sk-test",
            model="deepseek/deepseek-chat",
            temperature=0.7,
            max_tokens=1000,
        )

    @pytest.fixture
    def client(self, config: LLMConfig) -> LLMClient:
        """Create LLMClient instance."""
        return LLMClient(config=config, timeout=30.0)

    @pytest.fixture
    def mock_response(self) -> MagicMock:
        """Create mock LiteLLM response."""
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = "Oh, how original."
        return response

    async def test_complete_success(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test successful completion."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            result = await client.complete(MESSAGES)

        assert result == "Oh, how original."
        mock_completion.assert_awaited_once()

    async def test_complete_applies_config(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that config parameters are applied."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES)

        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["model"] == "deepseek/deepseek-chat"
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 1000
        assert call_kwargs["api_key"] == "sk-test"
        assert call_kwargs["messages"] == MESSAGES
        assert call_kwargs["timeout"] == 30.0
        assert call_kwargs["num_retries"] == 0
        assert "api_base" not in call_kwargs

    async def test_complete_api_base(self, mock_response: MagicMock) -> None:
        """Test that api_base is passed when configured."""
        client = LLMClient(
            LLMConfig(api_key="k", api_base="http://localhost:8000")
        )
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES)

        assert mock_completion.call_args.kwargs["api_base"] == "http://localhost:8000"

    async def test_complete_timeout_override(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that a per-call timeout overrides the default."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES, timeout=5.0)

        assert mock_completion.call_args.kwargs["timeout"] == 5.0

    async def test_complete_kwargs_override(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that kwargs can override config."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES, max_tokens=50, temperature=0.1)

        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["max_tokens"] == 50
        assert call_kwargs["temperature"] == 0.1

    async def test_complete_authentication_error(self, client: LLMClient) -> None:
        """Test that authentication errors are converted."""
        error = AuthenticationError(
            message="Invalid API key",
            llm_provider="deepseek",
            model="deepseek-chat",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMAuthenticationError):
                await client.complete(MESSAGES)

    async def test_complete_rate_limit_error(self, client: LLMClient) -> None:
        """Test that rate limit errors are converted and not transient."""
        error = RateLimitError(
            message="Rate limit exceeded",
            llm_provider="deepseek",
            model="deepseek-chat",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMRateLimitError) as exc_info:
                await client.complete(MESSAGES)

        assert not isinstance(exc_info.value, LLMTransientError)

    async def test_complete_timeout_error(self, client: LLMClient) -> None:
        """Test that litellm timeouts are converted to transient errors."""
        error = Timeout(
            message="Request timed out",
            model="deepseek-chat",
            llm_provider="deepseek",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMTimeoutError) as exc_info:
                await client.complete(MESSAGES)

        assert isinstance(exc_info.value, LLMTransientError)

    async def test_complete_asyncio_timeout(self, client: LLMClient) -> None:
        """Test that asyncio timeouts are converted too."""
        with patch(
            "litellm.acompletion", new=AsyncMock(side_effect=asyncio.TimeoutError())
        ):
            with pytest.raises(LLMTimeoutError):
                await client.complete(MESSAGES)

    async def test_complete_connection_error(self, client: LLMClient) -> None:
        """Test that connection errors are converted to transient errors."""
        error = APIConnectionError(
            message="Connection reset",
            llm_provider="deepseek",
            model="deepseek-chat",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMConnectionError) as exc_info:
                await client.complete(MESSAGES)

        assert isinstance(exc_info.value, LLMTransientError)

    async def test_complete_generic_error(self, client: LLMClient) -> None:
        """Test that other errors are converted to LLMError."""
        with patch(
            "litellm.acompletion", new=AsyncMock(side_effect=ValueError("boom"))
        ):
            with pytest.raises(LLMError) as exc_info:
                await client.complete(MESSAGES)

        assert not isinstance(exc_info.value, LLMTransientError)

    async def test_complete_empty_content(self, client: LLMClient) -> None:
        """Test that a response without content is an error."""
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = None
        with patch("litellm.acompletion", new=AsyncMock(return_value=response)):
            with pytest.raises(LLMError, match="no content"):
                await client.complete(MESSAGES)

    async def test_complete_no_choices(self, client: LLMClient) -> None:
        """Test that a response without choices is an error."""
        response = MagicMock()
        response.choices = []
        with patch("litellm.acompletion", new=AsyncMock(return_value=response)):
            with pytest.raises(LLMError, match="Malformed"):
                await client.complete(MESSAGES)
