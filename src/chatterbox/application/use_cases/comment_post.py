"""Comment channel post use case."""

import logging

from chatterbox.application.use_cases.messages import (
    POST_COMMENT_ERROR_MESSAGE,
    truncate_text,
)
from chatterbox.config import BotConfig
from chatterbox.domain.entities import InboundMessage, Role
from chatterbox.domain.services import (
    CompletionService,
    ContextStore,
    MessagingService,
    PromptAssembler,
    TopicInferrer,
    post_context_key,
)

logger = logging.getLogger(__name__)


class CommentPostUseCase:
    """Use case for commenting forwarded or relayed channel posts.

    Each post gets its own post context keyed by chat, post and bot, so
    later replies in the same thread can build on the comment.
    """

    def __init__(
        self,
        bot_config: BotConfig,
        bot_id: str,
        context_store: ContextStore,
        topic_inferrer: TopicInferrer,
        prompt_assembler: PromptAssembler,
        completion_service: CompletionService,
        messaging_service: MessagingService,
        min_text_length: int = 5,
        max_safe_length: int = 10000,
    ) -> None:
        """Initialize the use case.

        Args:
            bot_config: Bot configuration (name, comment template).
            bot_id: The bot's user ID.
            context_store: Store for post contexts.
            topic_inferrer: Service inferring the post topic.
            prompt_assembler: Prompt builder.
            completion_service: Completion gateway.
            messaging_service: Outbound delivery.
            min_text_length: Posts shorter than this are not commented.
            max_safe_length: Longer post texts are truncated.
        """
        self._bot_config = bot_config
        self._bot_id = bot_id
        self._context_store = context_store
        self._topic_inferrer = topic_inferrer
        self._prompt_assembler = prompt_assembler
        self._completion_service = completion_service
        self._messaging_service = messaging_service
        self._min_text_length = min_text_length
        self._max_safe_length = max_safe_length

    async def execute(self, message: InboundMessage) -> None:
        """Execute the use case.

        Processing flow:
        1. Skip posts without enough text
        2. Infer the post topic
        3. Fetch or create the post context with that topic
        4. Request a comment with a single-shot prompt
        5. Record post and comment in the post context
        6. Reply to the post

        Failures are logged and answered with a fixed message; they are
        never raised.

        Args:
            message: The channel post.
        """
        post_text = message.text or ""
        if len(post_text) < self._min_text_length:
            return

        name = self._bot_config.name
        logger.info(
            "[%s] Commenting post: %s%s",
            name,
            post_text[:50],
            "..." if len(post_text) > 50 else "",
        )

        try:
            topic = await self._topic_inferrer.infer(post_text)
            logger.info("[%s] Post topic: %s", name, topic)

            key = post_context_key(message.chat_id, message.message_id, self._bot_id)
            context = self._context_store.get_post_context(key, topic)

            truncated = truncate_text(post_text, self._max_safe_length)
            prompt = self._prompt_assembler.build_post_comment(
                truncated, self._bot_config.post_comment_prompt_template
            )
            comment = await self._completion_service.complete(prompt)

            now = self._context_store.now()
            context.append(Role.USER, truncated, now)
            context.append(Role.ASSISTANT, comment, now)

            await self._messaging_service.send_split_message(
                message.chat_id, comment, message.reply_target_id
            )
        except Exception:
            logger.exception("[%s] Error commenting post", name)
            await self._send_error(message)

    async def _send_error(self, message: InboundMessage) -> None:
        try:
            await self._messaging_service.send_message(
                message.chat_id, POST_COMMENT_ERROR_MESSAGE
            )
        except Exception:
            logger.exception(
                "[%s] Failed to send error message", self._bot_config.name
            )
