"""Inbound message classification."""

import logging
import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum

from chatterbox.domain.entities import InboundMessage

logger = logging.getLogger(__name__)


class Dispatch(Enum):
    """How an inbound message should be handled."""

    CHANNEL_POST = "channel_post"
    DIRECT = "direct"
    STALE = "stale"
    IGNORE = "ignore"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispatchPolicy:
    """Decides whether and how a bot responds to an inbound message.

    Channel posts are commented regardless of age (subject to the comment
    probability). Messages addressed to the bot, by reply or by mention,
    are answered only when they are not older than the cutoff; older ones
    are reported as stale so that a backlog delivered after a restart is
    not replayed.
    """

    def __init__(
        self,
        bot_id: str,
        bot_handle: str,
        startup_time: datetime,
        ignore_older_than_minutes: int | None = None,
        comment_probability: float = 1.0,
        rand: Callable[[], float] = random.random,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the policy.

        Args:
            bot_id: The bot's user ID.
            bot_handle: The string that mentions the bot in message text.
            startup_time: Process start time (default cutoff).
            ignore_older_than_minutes: Overrides the cutoff with
                `now - minutes` when set.
            comment_probability: Chance of commenting a channel post.
            rand: Source of uniform numbers in [0, 1).
            clock: Returns the current aware datetime.
        """
        self._bot_id = bot_id
        self._bot_handle = bot_handle
        self._startup_time = startup_time
        self._ignore_older_than_minutes = ignore_older_than_minutes
        self._comment_probability = comment_probability
        self._rand = rand
        self._clock = clock

    @property
    def bot_handle(self) -> str:
        """Mention string of the bot."""
        return self._bot_handle

    def cutoff(self) -> datetime:
        """Oldest timestamp of a message the bot still answers."""
        if self._ignore_older_than_minutes is not None:
            return self._clock() - timedelta(minutes=self._ignore_older_than_minutes)
        return self._startup_time

    def is_addressed(self, message: InboundMessage) -> bool:
        """Check if the message replies to the bot or mentions it."""
        if message.is_reply_to(self._bot_id):
            return True
        return bool(self._bot_handle) and self._bot_handle in (message.text or "")

    def classify(self, message: InboundMessage) -> Dispatch:
        """Classify an inbound message.

        Args:
            message: The inbound message.

        Returns:
            Dispatch decision.
        """
        if not message.text:
            return Dispatch.IGNORE

        if message.sender_id is not None and message.sender_id == self._bot_id:
            return Dispatch.IGNORE

        if message.is_channel_post() and self._rand() < self._comment_probability:
            return Dispatch.CHANNEL_POST

        if not self.is_addressed(message):
            return Dispatch.IGNORE

        if message.timestamp < self.cutoff():
            return Dispatch.STALE
        return Dispatch.DIRECT

    def strip_handle(self, text: str) -> str:
        """Remove the first mention of the bot from a text."""
        if not self._bot_handle or self._bot_handle not in text:
            return text
        return text.replace(self._bot_handle, "", 1).strip()
