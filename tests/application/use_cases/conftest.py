"""Common fixtures for use case tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from chatterbox.config import BotConfig, ContextConfig, LLMConfig, SlackConfig
from chatterbox.domain.services import ContextStore, DispatchPolicy, PromptAssembler

BOT_ID = "UBOT123"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def bot_config() -> BotConfig:
    """Create test bot config."""
    return BotConfig(
        name="ToxicBot",
        slack=SlackConfig(bot_token="xoxb-test", app_token="xapp-test"),
        llm=LLMConfig(api_key="sk-test"),
        system_prompt="You are a sarcastic bot.",
        post_comment_prompt_template='Comment on this post: "{postText}"',
    )


@pytest.fixture
def context_store() -> ContextStore:
    """Create a context store with a fixed clock."""
    return ContextStore(ContextConfig(), clock=lambda: NOW, name="ToxicBot")


@pytest.fixture
def prompt_assembler(bot_config: BotConfig) -> PromptAssembler:
    """Create a prompt assembler."""
    return PromptAssembler(bot_config.system_prompt)


@pytest.fixture
def dispatch_policy() -> DispatchPolicy:
    """Create a dispatch policy."""
    return DispatchPolicy(
        bot_id=BOT_ID,
        bot_handle=f"<@{BOT_ID}>",
        startup_time=NOW - timedelta(hours=1),
        clock=lambda: NOW,
    )


@pytest.fixture
def mock_topic_inferrer() -> Mock:
    """Create mock TopicInferrer."""
    inferrer = Mock()
    inferrer.infer = AsyncMock(return_value="price increase")
    return inferrer


@pytest.fixture
def mock_completion_service() -> Mock:
    """Create mock CompletionService."""
    service = Mock()
    service.complete = AsyncMock(return_value="Oh great, more expensive air.")
    return service


@pytest.fixture
def mock_messaging_service() -> Mock:
    """Create mock MessagingService."""
    service = Mock()
    service.send_message = AsyncMock()
    service.send_split_message = AsyncMock()
    return service
