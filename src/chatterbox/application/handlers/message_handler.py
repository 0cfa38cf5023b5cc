"""Handler for inbound messages.

Classifies each message with the DispatchPolicy and routes it to the
matching use case. This is the top-level catch-all of per-message handling:
nothing raised here reaches the platform framework.
"""

import logging

from chatterbox.application.use_cases import CommentPostUseCase, ReplyToMentionUseCase
from chatterbox.domain.entities import InboundMessage
from chatterbox.domain.services import Dispatch, DispatchPolicy

logger = logging.getLogger(__name__)


class MessageHandler:
    """Routes inbound messages of one bot instance."""

    def __init__(
        self,
        name: str,
        dispatch_policy: DispatchPolicy,
        comment_post_use_case: CommentPostUseCase,
        reply_use_case: ReplyToMentionUseCase,
    ) -> None:
        """Initialize the handler.

        Args:
            name: Bot name used in log messages.
            dispatch_policy: Message classifier.
            comment_post_use_case: Use case for channel posts.
            reply_use_case: Use case for messages addressed to the bot.
        """
        self._name = name
        self._dispatch_policy = dispatch_policy
        self._comment_post_use_case = comment_post_use_case
        self._reply_use_case = reply_use_case

    async def handle(self, message: InboundMessage) -> Dispatch | None:
        """Handle an inbound message.

        Args:
            message: The inbound message.

        Returns:
            The dispatch decision, or None if handling failed unexpectedly.
        """
        try:
            decision = self._dispatch_policy.classify(message)

            if decision is Dispatch.CHANNEL_POST:
                await self._comment_post_use_case.execute(message)
            elif decision is Dispatch.DIRECT:
                await self._reply_use_case.execute(message)
            elif decision is Dispatch.STALE:
                logger.info(
                    "[%s] Ignoring old message from %s: %s...",
                    self._name,
                    message.sender_id,
                    (message.text or "")[:50],
                )
            return decision
        except Exception:
            logger.exception(
                "[%s] Error in message handler: message=%s",
                self._name,
                message.message_id,
            )
            return None
