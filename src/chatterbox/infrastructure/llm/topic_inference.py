"""LLM-based topic inference."""

import logging

from chatterbox.domain.services.topic import DEFAULT_TOPIC, clean_topic, heuristic_topic
from chatterbox.infrastructure.llm.client import LLMClient

logger = logging.getLogger(__name__)

TOPIC_INSTRUCTION = (
    "Identify the main topic of the text in 3-7 words. "
    "Reply with the topic only, without any explanation."
)
MIN_TEXT_LENGTH = 10
MAX_INPUT_CHARS = 500
TOPIC_TIMEOUT_SECONDS = 5.0


class LLMTopicInferrer:
    """Infers a short topic label for a text.

    This class implements the TopicInferrer protocol. One completion call
    is made per text; any failure falls back to `heuristic_topic`.
    """

    def __init__(
        self,
        client: LLMClient,
        fallback_label: str = DEFAULT_TOPIC,
        timeout_seconds: float = TOPIC_TIMEOUT_SECONDS,
        name: str = "",
    ) -> None:
        """Initialize the inferrer.

        Args:
            client: LLMClient instance.
            fallback_label: Label for near-empty input or empty model output.
            timeout_seconds: Timeout of the single completion call.
            name: Bot name used in log messages.
        """
        self._client = client
        self._fallback_label = fallback_label
        self._timeout = timeout_seconds
        self._name = name

    async def infer(self, text: str) -> str:
        """Infer the topic of a text.

        Args:
            text: Source text.

        Returns:
            Topic label. Never raises.
        """
        if len(text.strip()) < MIN_TEXT_LENGTH:
            return self._fallback_label

        messages = [
            {"role": "system", "content": TOPIC_INSTRUCTION},
            {"role": "user", "content": text[:MAX_INPUT_CHARS]},
        ]
        try:
            raw = await self._client.complete(messages, timeout=self._timeout)
        except Exception as e:
            logger.warning("[%s] Error inferring topic: %s", self._name, e)
            return heuristic_topic(text, self._fallback_label)

        return clean_topic(raw) or self._fallback_label
