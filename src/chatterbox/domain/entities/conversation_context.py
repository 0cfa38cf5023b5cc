"""Conversation context entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Role(str, Enum):
    """Chat message roles understood by the completion API."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ContextNamespace(Enum):
    """Disjoint key spaces for conversation contexts."""

    USER = "user"
    POST = "post"


@dataclass(frozen=True)
class ChatMessage:
    """One (role, content) entry of a conversation history.

    Attributes:
        role: Message role.
        content: Message text.
    """

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the OpenAI-format message dict."""
        return {"role": self.role.value, "content": self.content}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversationContext:
    """Bounded conversational memory for one user or one post.

    Only the logical owner of the key mutates a context; the store that
    holds it guards the mapping, not the fields.

    Attributes:
        max_history: Maximum number of history entries kept.
        history: Entries in insertion order (oldest first).
        last_interaction: Time of the most recent use or append.
        topic: Short label for the subject under discussion.
        message_count: Raw count of appended entries. Never decremented,
            independent of history truncation.
        is_active_conversation: True once a direct exchange happened.
            Selects the longer TTL tier.
    """

    max_history: int = 30
    history: list[ChatMessage] = field(default_factory=list)
    last_interaction: datetime = field(default_factory=_utcnow)
    topic: str | None = None
    message_count: int = 0
    is_active_conversation: bool = False

    def append(self, role: Role, content: str, now: datetime | None = None) -> None:
        """Append an entry, dropping the oldest ones beyond max_history.

        Args:
            role: Message role.
            content: Message text.
            now: Interaction time. Defaults to the current UTC time.
        """
        self.history.append(ChatMessage(role=role, content=content))
        self.message_count += 1
        self.last_interaction = now or _utcnow()
        if len(self.history) > self.max_history:
            del self.history[: len(self.history) - self.max_history]

    def mark_active(self) -> None:
        """Mark this context as part of an ongoing direct conversation."""
        self.is_active_conversation = True

    def recent_history(self, length: int) -> list[ChatMessage]:
        """Return a copy of the newest `length` entries, oldest first."""
        if length <= 0:
            return []
        return list(self.history[-length:])
