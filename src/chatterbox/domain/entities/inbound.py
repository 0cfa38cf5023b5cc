"""Inbound message entity.

Platform events are decoded once at the adapter boundary into these closed
types; dispatch logic only inspects the explicit optional fields.
"""

from dataclasses import dataclass
from datetime import datetime

CHANNEL_CHAT_TYPE = "channel"


@dataclass(frozen=True)
class ChatRef:
    """Reference to a chat (channel, group, etc.).

    Attributes:
        id: Platform chat ID.
        type: Chat type, e.g. "channel".
    """

    id: str
    type: str

    def is_channel(self) -> bool:
        """Check if this chat is a broadcast channel."""
        return self.type == CHANNEL_CHAT_TYPE


def _is_channel_post(
    sender_id: str | None,
    forward_origin: ChatRef | None,
    sender_chat: ChatRef | None,
) -> bool:
    # Forwarded from a channel, or relayed from a linked channel with no user
    if forward_origin is not None and forward_origin.is_channel():
        return True
    return sender_id is None and sender_chat is not None and sender_chat.is_channel()


@dataclass(frozen=True)
class MessageRef:
    """The message an inbound message replies to.

    Attributes:
        message_id: Platform message ID.
        sender_id: Sender user ID, if sent by a user.
        text: Text or caption, if any.
        forward_origin: Origin chat when the message was forwarded.
        sender_chat: Chat that posted the message on behalf of no user.
    """

    message_id: str
    sender_id: str | None = None
    text: str | None = None
    forward_origin: ChatRef | None = None
    sender_chat: ChatRef | None = None

    def is_channel_post(self) -> bool:
        """Check if the referenced message is a channel post."""
        return _is_channel_post(self.sender_id, self.forward_origin, self.sender_chat)


@dataclass(frozen=True)
class InboundMessage:
    """A message received from the messaging platform.

    Attributes:
        message_id: Platform message ID.
        chat_id: Chat the message was posted in.
        sender_id: Sender user ID (None for channel relays).
        text: Text or media caption (None when there is neither).
        timestamp: When the message was sent.
        forward_origin: Origin chat when the message was forwarded.
        sender_chat: Chat that posted the message on behalf of no user.
        reply_to: The message this one replies to.
        thread_id: Thread the message belongs to, when the platform groups
            replies under a root message.
    """

    message_id: str
    chat_id: str
    sender_id: str | None
    text: str | None
    timestamp: datetime
    forward_origin: ChatRef | None = None
    sender_chat: ChatRef | None = None
    reply_to: MessageRef | None = None
    thread_id: str | None = None

    @property
    def reply_target_id(self) -> str:
        """ID to reply to: the thread root if any, else this message."""
        return self.thread_id or self.message_id

    def is_channel_post(self) -> bool:
        """Check if this message is a forwarded or auto-relayed channel post."""
        return _is_channel_post(self.sender_id, self.forward_origin, self.sender_chat)

    def is_reply_to(self, user_id: str) -> bool:
        """Check if this message replies to a message sent by `user_id`."""
        return self.reply_to is not None and self.reply_to.sender_id == user_id
