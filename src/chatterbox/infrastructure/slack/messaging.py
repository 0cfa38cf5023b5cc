"""Slack messaging service."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from chatterbox.config import MessagesConfig
from chatterbox.domain.services.message_splitter import split_message

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

ABNORMAL_LENGTH_NOTE = "... [message cut because of abnormal length]"


class SlackMessagingService:
    """Slack implementation of MessagingService.

    Replies are posted in the thread of the target message. Each send is
    retried once without the thread when the threaded send fails.
    """

    def __init__(
        self,
        client: AsyncWebClient,
        config: MessagesConfig | None = None,
        *,
        name: str = "",
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the service.

        Args:
            client: Slack AsyncWebClient instance.
            config: Message size and pacing settings.
            name: Bot name used in log messages.
            sleep: Awaitable sleep used between message parts.
        """
        self._client = client
        self._config = config or MessagesConfig()
        self._name = name
        self._sleep = sleep
        self._bot_user_id: str | None = None

    async def send_message(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: str | None = None,
    ) -> None:
        """Send a message, retrying once without the thread on failure.

        Args:
            chat_id: Target channel ID.
            text: Message content.
            reply_to_message_id: Timestamp of the message to reply to.

        Raises:
            SlackApiError: If the send without thread also fails.
        """
        try:
            await self._post(chat_id, text, reply_to_message_id)
            return
        except SlackApiError as e:
            if reply_to_message_id is None:
                raise
            logger.warning(
                "[%s] Failed to reply to %s, sending without thread: %s",
                self._name,
                reply_to_message_id,
                e,
            )
        await self._post(chat_id, text, None)

    async def send_split_message(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: str | None = None,
    ) -> None:
        """Send a text, splitting it into numbered parts if it is too long.

        Only the first part replies to the target message. A part that
        cannot be sent even without the thread is logged and skipped.

        Args:
            chat_id: Target channel ID.
            text: Message content.
            reply_to_message_id: Timestamp of the message to reply to.
        """
        if not text or not text.strip() or text.strip() == "[]":
            logger.warning("[%s] Prevented sending empty message", self._name)
            return

        if len(text) > self._config.max_safe_length * 5:
            logger.warning(
                "[%s] Extremely long message (%d chars), truncating",
                self._name,
                len(text),
            )
            text = text[: self._config.max_length] + ABNORMAL_LENGTH_NOTE

        parts = split_message(text, self._config.max_length)
        if len(parts) == 1:
            await self.send_message(chat_id, parts[0], reply_to_message_id)
            return

        for i, part in enumerate(parts):
            try:
                await self.send_message(
                    chat_id, part, reply_to_message_id if i == 0 else None
                )
            except SlackApiError:
                logger.exception(
                    "[%s] Failed to send message part %d/%d",
                    self._name,
                    i + 1,
                    len(parts),
                )
            if i < len(parts) - 1:
                await self._sleep(self._config.part_delay_seconds)

    async def get_bot_user_id(self) -> str:
        """Get the bot's user ID.

        Returns:
            The bot's user ID.

        Note:
            The result is cached after the first call.
        """
        if self._bot_user_id is None:
            response = await self._client.auth_test()
            self._bot_user_id = response["user_id"]
        return self._bot_user_id

    async def _post(self, chat_id: str, text: str, thread_ts: str | None) -> None:
        await self._client.chat_postMessage(
            channel=chat_id,
            text=text,
            thread_ts=thread_ts,
        )
