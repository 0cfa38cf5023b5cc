"""Tests for CommentPostUseCase."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from chatterbox.application.use_cases import CommentPostUseCase
from chatterbox.application.use_cases.messages import (
    POST_COMMENT_ERROR_MESSAGE,
    TRUNCATED_INPUT_NOTE,
)
from chatterbox.config import BotConfig
from chatterbox.domain.entities import ChatRef, InboundMessage, Role
from chatterbox.domain.services import ContextStore, PromptAssembler, post_context_key
from chatterbox.infrastructure.llm import LLMConnectionError

BOT_ID = "UBOT123"
POST_TEXT = "Prices for everything went up again this month."


def make_post(text: str | None = POST_TEXT) -> InboundMessage:
    return InboundMessage(
        message_id="1714564800.000100",
        chat_id="C123",
        sender_id="U555",
        text=text,
        timestamp=datetime(2024, 4, 1, tzinfo=timezone.utc),
        forward_origin=ChatRef(id="C999", type="channel"),
    )


@pytest.fixture
def use_case(
    bot_config: BotConfig,
    context_store: ContextStore,
    mock_topic_inferrer: Mock,
    prompt_assembler: PromptAssembler,
    mock_completion_service: Mock,
    mock_messaging_service: Mock,
) -> CommentPostUseCase:
    """Create use case instance."""
    return CommentPostUseCase(
        bot_config=bot_config,
        bot_id=BOT_ID,
        context_store=context_store,
        topic_inferrer=mock_topic_inferrer,
        prompt_assembler=prompt_assembler,
        completion_service=mock_completion_service,
        messaging_service=mock_messaging_service,
        min_text_length=5,
        max_safe_length=100,
    )


class TestCommentPostUseCase:
    """CommentPostUseCase tests."""

    async def test_comments_post(
        self,
        use_case: CommentPostUseCase,
        mock_completion_service: Mock,
        mock_messaging_service: Mock,
    ) -> None:
        """Test that a post is commented with a single-shot prompt."""
        await use_case.execute(make_post())

        mock_completion_service.complete.assert_awaited_once_with(
            [
                {"role": "system", "content": "You are a sarcastic bot."},
                {
                    "role": "user",
                    "content": f'Comment on this post: "{POST_TEXT}"',
                },
            ]
        )
        mock_messaging_service.send_split_message.assert_awaited_once_with(
            "C123", "Oh great, more expensive air.", "1714564800.000100"
        )

    async def test_records_post_context(
        self,
        use_case: CommentPostUseCase,
        context_store: ContextStore,
        mock_topic_inferrer: Mock,
    ) -> None:
        """Test that the post context gets the topic and both turns."""
        await use_case.execute(make_post())

        mock_topic_inferrer.infer.assert_awaited_once_with(POST_TEXT)
        key = post_context_key("C123", "1714564800.000100", BOT_ID)
        context = context_store.get_post_context(key)
        assert context.topic == "price increase"
        assert [(m.role, m.content) for m in context.history] == [
            (Role.USER, POST_TEXT),
            (Role.ASSISTANT, "Oh great, more expensive air."),
        ]
        assert context.is_active_conversation is False
        assert context_store.count_active().posts == 1
        assert context_store.count_active().users == 0

    @pytest.mark.parametrize("text", [None, "", "hey"])
    async def test_skips_short_posts(
        self,
        use_case: CommentPostUseCase,
        mock_completion_service: Mock,
        mock_messaging_service: Mock,
        text: str | None,
    ) -> None:
        """Test that posts shorter than the minimum are not commented."""
        await use_case.execute(make_post(text))

        mock_completion_service.complete.assert_not_awaited()
        mock_messaging_service.send_split_message.assert_not_awaited()

    async def test_long_post_truncated(
        self,
        use_case: CommentPostUseCase,
        mock_completion_service: Mock,
    ) -> None:
        """Test that a post above the safe length is shortened in the prompt."""
        await use_case.execute(make_post("y" * 300))

        prompt = mock_completion_service.complete.call_args.args[0]
        assert "y" * 100 + TRUNCATED_INPUT_NOTE in prompt[1]["content"]
        assert "y" * 101 not in prompt[1]["content"]

    async def test_completion_error_sends_fixed_message(
        self,
        use_case: CommentPostUseCase,
        context_store: ContextStore,
        mock_completion_service: Mock,
        mock_messaging_service: Mock,
    ) -> None:
        """Test that a failed comment is answered with the fixed message."""
        mock_completion_service.complete.side_effect = LLMConnectionError("reset")

        await use_case.execute(make_post())

        mock_messaging_service.send_message.assert_awaited_once_with(
            "C123", POST_COMMENT_ERROR_MESSAGE
        )
        mock_messaging_service.send_split_message.assert_not_awaited()
        key = post_context_key("C123", "1714564800.000100", BOT_ID)
        assert context_store.get_post_context(key).history == []

    async def test_error_message_failure_is_swallowed(
        self,
        use_case: CommentPostUseCase,
        mock_completion_service: Mock,
        mock_messaging_service: Mock,
    ) -> None:
        """Test that a failing error message does not raise."""
        mock_completion_service.complete.side_effect = LLMConnectionError("reset")
        mock_messaging_service.send_message.side_effect = RuntimeError("down")

        await use_case.execute(make_post())

        mock_messaging_service.send_message.assert_awaited_once()
