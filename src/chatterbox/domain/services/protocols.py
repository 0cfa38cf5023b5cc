"""Domain service protocols."""

from typing import Protocol


class MessagingService(Protocol):
    """Outbound delivery abstraction (platform-independent)."""

    async def send_message(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: str | None = None,
    ) -> None:
        """Send a single message, retrying once without the reply link.

        Args:
            chat_id: Target chat ID.
            text: Message content.
            reply_to_message_id: Message to reply to.
        """
        ...

    async def send_split_message(
        self,
        chat_id: str,
        text: str,
        reply_to_message_id: str | None = None,
    ) -> None:
        """Send a text, splitting it into several messages if needed.

        Args:
            chat_id: Target chat ID.
            text: Message content.
            reply_to_message_id: Message the first part replies to.
        """
        ...


class CompletionService(Protocol):
    """Chat completion abstraction."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_retries: int | None = None,
        timeout: float | None = None,
    ) -> str:
        """Return the reply text for an OpenAI-format message list.

        Raises:
            LLMError: When the completion fails.
        """
        ...


class TopicInferrer(Protocol):
    """Topic inference abstraction."""

    async def infer(self, text: str) -> str:
        """Return a short topic label for a text. Never raises."""
        ...
