"""Domain entities."""

from chatterbox.domain.entities.conversation_context import (
    ChatMessage,
    ContextNamespace,
    ConversationContext,
    Role,
)
from chatterbox.domain.entities.inbound import ChatRef, InboundMessage, MessageRef

__all__ = [
    "ChatMessage",
    "ChatRef",
    "ContextNamespace",
    "ConversationContext",
    "InboundMessage",
    "MessageRef",
    "Role",
]
