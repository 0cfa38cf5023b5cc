"""Slack event adapter."""

import logging
from datetime import datetime, timezone
from typing import Any

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from chatterbox.domain.entities import ChatRef, InboundMessage, MessageRef
from chatterbox.domain.entities.inbound import CHANNEL_CHAT_TYPE

logger = logging.getLogger(__name__)


def _shared_origin(event: dict[str, Any]) -> ChatRef | None:
    """Return the origin channel of a shared (forwarded) message."""
    for attachment in event.get("attachments") or []:
        if attachment.get("is_share") and attachment.get("channel_id"):
            return ChatRef(id=attachment["channel_id"], type=CHANNEL_CHAT_TYPE)
    return None


def _relaying_channel(event: dict[str, Any]) -> ChatRef | None:
    """Return the channel an integration post was relayed into."""
    if event.get("user") or not event.get("bot_id"):
        return None
    if event.get("subtype") not in {None, "bot_message"}:
        return None
    return ChatRef(id=event.get("channel", ""), type=CHANNEL_CHAT_TYPE)


def extract_text(event: dict[str, Any]) -> str | None:
    """Extract the text or caption of a Slack message.

    For shared messages the shared content is used; otherwise the message
    text, falling back to the first attachment or file caption.

    Args:
        event: Slack message payload.

    Returns:
        Text, or None if the message has none.
    """
    attachments = event.get("attachments") or []
    for attachment in attachments:
        if attachment.get("is_share"):
            shared = attachment.get("text") or attachment.get("fallback")
            if shared:
                return shared

    if event.get("text"):
        return event["text"]

    for attachment in attachments:
        caption = attachment.get("text") or attachment.get("fallback")
        if caption:
            return caption

    for file in event.get("files") or []:
        caption = file.get("title")
        if caption:
            return caption

    return None


class SlackEventAdapter:
    """Convert Slack message events to InboundMessage entities.

    Shape checks on the raw payload happen only here; the rest of the
    application works with the explicit optional fields of InboundMessage.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        """Initialize the adapter.

        Args:
            client: Slack AsyncWebClient used to fetch thread parents.
        """
        self._client = client

    async def to_inbound_message(self, event: dict[str, Any]) -> InboundMessage:
        """Convert a Slack event to an InboundMessage.

        Args:
            event: Slack message event payload.

        Returns:
            InboundMessage entity.
        """
        ts = event["ts"]
        channel_id = event["channel"]
        thread_ts = event.get("thread_ts")

        reply_to: MessageRef | None = None
        if thread_ts and thread_ts != ts:
            reply_to = await self._fetch_parent(channel_id, thread_ts, event)

        return InboundMessage(
            message_id=ts,
            chat_id=channel_id,
            sender_id=event.get("user"),
            text=extract_text(event),
            timestamp=datetime.fromtimestamp(float(ts), tz=timezone.utc),
            forward_origin=_shared_origin(event),
            sender_chat=_relaying_channel(event),
            reply_to=reply_to,
            thread_id=thread_ts,
        )

    async def _fetch_parent(
        self, channel_id: str, thread_ts: str, event: dict[str, Any]
    ) -> MessageRef:
        """Fetch the thread parent of a reply.

        Falls back to the `parent_user_id` carried by the event when the
        parent cannot be fetched.
        """
        try:
            response = await self._client.conversations_replies(
                channel=channel_id,
                ts=thread_ts,
                limit=1,
            )
            messages = response.get("messages") or []
        except SlackApiError as e:
            logger.warning("Failed to fetch thread parent %s: %s", thread_ts, e)
            messages = []

        if not messages:
            return MessageRef(message_id=thread_ts, sender_id=event.get("parent_user_id"))

        parent = {**messages[0], "channel": channel_id}
        return MessageRef(
            message_id=thread_ts,
            sender_id=parent.get("user"),
            text=extract_text(parent),
            forward_origin=_shared_origin(parent),
            sender_chat=_relaying_channel(parent),
        )
