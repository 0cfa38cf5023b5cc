"""Reply to mention use case."""

import logging

from chatterbox.application.use_cases.messages import (
    GENERIC_ERROR_MESSAGE,
    MIN_REPLY_LENGTH,
    RATE_LIMITED_MESSAGE,
    TIMEOUT_MESSAGE,
    TRUNCATED_REPLY_LENGTH,
    TRUNCATED_REPLY_NOTE,
    UNCLEAR_REPLY_MESSAGE,
    truncate_text,
)
from chatterbox.config import BotConfig
from chatterbox.domain.entities import ConversationContext, InboundMessage, Role
from chatterbox.domain.services import (
    CompletionService,
    ContextStore,
    DispatchPolicy,
    MessagingService,
    PromptAssembler,
    TopicInferrer,
    user_context_key,
)
from chatterbox.infrastructure.llm.exceptions import LLMRateLimitError, LLMTimeoutError

logger = logging.getLogger(__name__)


class ReplyToMentionUseCase:
    """Use case for replying to messages addressed to the bot.

    This use case keeps a per-user conversation context, assembles a
    windowed prompt from it and answers in the thread of the message.
    """

    def __init__(
        self,
        bot_config: BotConfig,
        bot_id: str,
        dispatch_policy: DispatchPolicy,
        context_store: ContextStore,
        topic_inferrer: TopicInferrer,
        prompt_assembler: PromptAssembler,
        completion_service: CompletionService,
        messaging_service: MessagingService,
        max_safe_length: int = 10000,
    ) -> None:
        """Initialize the use case.

        Args:
            bot_config: Bot configuration.
            bot_id: The bot's user ID.
            dispatch_policy: Policy used to strip the bot handle.
            context_store: Store for user contexts.
            topic_inferrer: Service inferring the topic of replied posts.
            prompt_assembler: Prompt builder.
            completion_service: Completion gateway.
            messaging_service: Outbound delivery.
            max_safe_length: Longer inputs and replies are truncated.
        """
        self._bot_config = bot_config
        self._bot_id = bot_id
        self._dispatch_policy = dispatch_policy
        self._context_store = context_store
        self._topic_inferrer = topic_inferrer
        self._prompt_assembler = prompt_assembler
        self._completion_service = completion_service
        self._messaging_service = messaging_service
        self._max_safe_length = max_safe_length

    async def execute(self, message: InboundMessage) -> None:
        """Execute the use case.

        Processing flow:
        1. Strip the bot handle from the text
        2. Fetch or create the user context and mark it active
        3. Attach the topic of a replied channel post
        4. Append the user turn
        5. Build the prompt and request a reply
        6. Sanitize and append the assistant turn
        7. Send the reply

        Errors are answered with a fixed message and logged, never raised.

        Args:
            message: The message addressed to the bot.
        """
        name = self._bot_config.name
        text = self._dispatch_policy.strip_handle(message.text or "")
        logger.info("[%s] Received message: %s", name, text[:100])

        try:
            key = user_context_key(message.chat_id, message.sender_id, self._bot_id)
            context = self._context_store.get_user_context(key)
            context.mark_active()

            await self._attach_reply_topic(message, context)
            self._context_store.touch(context)

            context.append(
                Role.USER,
                truncate_text(text, self._max_safe_length),
                self._context_store.now(),
            )

            prompt = self._prompt_assembler.build(context)
            reply = self.sanitize_reply(await self._completion_service.complete(prompt))

            context.append(Role.ASSISTANT, reply, self._context_store.now())

            await self._messaging_service.send_split_message(
                message.chat_id, reply, message.reply_target_id
            )
        except Exception as e:
            logger.exception("[%s] Error handling direct message", name)
            await self._send_error(message, e)

    def sanitize_reply(self, reply: str) -> str:
        """Replace suspiciously short replies and cut overly long ones.

        Args:
            reply: Raw model reply.

        Returns:
            Reply safe to send.
        """
        if len(reply) < MIN_REPLY_LENGTH:
            return UNCLEAR_REPLY_MESSAGE

        if len(reply) > self._max_safe_length:
            logger.warning(
                "[%s] Unusually long response (%d chars)",
                self._bot_config.name,
                len(reply),
            )
            return reply[:TRUNCATED_REPLY_LENGTH] + TRUNCATED_REPLY_NOTE

        return reply

    async def _attach_reply_topic(
        self, message: InboundMessage, context: ConversationContext
    ) -> None:
        """Set the context topic when the message replies to a channel post."""
        reply_to = message.reply_to
        if reply_to is None or not reply_to.text or not reply_to.is_channel_post():
            return
        context.topic = await self._topic_inferrer.infer(reply_to.text)

    async def _send_error(self, message: InboundMessage, error: Exception) -> None:
        """Send a user-facing message describing the failure."""
        if isinstance(error, LLMRateLimitError):
            text = RATE_LIMITED_MESSAGE
        elif isinstance(error, LLMTimeoutError):
            text = TIMEOUT_MESSAGE
        else:
            text = GENERIC_ERROR_MESSAGE

        try:
            await self._messaging_service.send_message(
                message.chat_id, text, message.reply_target_id
            )
        except Exception:
            logger.exception(
                "[%s] Could not send any error message", self._bot_config.name
            )
