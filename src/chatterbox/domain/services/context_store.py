"""In-memory conversation context store with tiered TTL eviction."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from chatterbox.config.models import ContextConfig
from chatterbox.domain.entities import ContextNamespace, ConversationContext

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def user_context_key(chat_id: str, user_id: str | None, bot_id: str) -> str:
    """Build the user context key for a (chat, user, bot) triple."""
    return f"{chat_id}_{user_id or 'unknown'}_{bot_id}"


def post_context_key(chat_id: str, message_id: str, bot_id: str) -> str:
    """Build the post context key for a (chat, post, bot) triple."""
    return f"post_{chat_id}_{message_id}_{bot_id}"


@dataclass(frozen=True)
class ActiveContextCounts:
    """Number of live contexts per namespace."""

    users: int
    posts: int


class ContextStore:
    """Owns the user and post context mappings of one bot instance.

    Contexts are created lazily and removed only by `sweep`. The lock
    guards the structure of both mappings (insert during sweep, delete
    during lookup); it is never held across an await.
    """

    def __init__(
        self,
        config: ContextConfig,
        max_history: int = 30,
        clock: Clock = _utcnow,
        name: str = "",
    ) -> None:
        """Initialize the store.

        Args:
            config: TTL settings.
            max_history: History bound for newly created contexts.
            clock: Returns the current aware datetime.
            name: Bot name used in log messages.
        """
        self._base_ttl = timedelta(seconds=config.base_ttl_seconds)
        self._active_ttl = timedelta(seconds=config.active_ttl_seconds)
        self._max_history = max_history
        self._clock = clock
        self._name = name
        self._lock = threading.Lock()
        self._contexts: dict[ContextNamespace, dict[str, ConversationContext]] = {
            ContextNamespace.USER: {},
            ContextNamespace.POST: {},
        }

    def get_or_create(
        self,
        namespace: ContextNamespace,
        key: str,
        topic_hint: str | None = None,
    ) -> ConversationContext:
        """Return the context for `key`, creating it if missing.

        An existing context is marked as used now. A non-empty
        `topic_hint` becomes the topic of a new context, or overwrites the
        topic of an existing one. History is never touched here.

        Args:
            namespace: Which key space to use.
            key: Context key.
            topic_hint: Optional topic label.

        Returns:
            The stored context.
        """
        now = self._clock()
        with self._lock:
            mapping = self._contexts[namespace]
            context = mapping.get(key)
            if context is None:
                context = ConversationContext(
                    max_history=self._max_history,
                    last_interaction=now,
                    topic=topic_hint or None,
                )
                mapping[key] = context
                logger.debug(
                    "[%s] Created %s context: %s", self._name, namespace.value, key
                )
                return context
            # Under the lock: sweep reads last_interaction
            context.last_interaction = now

        if topic_hint:
            context.topic = topic_hint
        return context

    def get_user_context(self, key: str) -> ConversationContext:
        """Fetch or create a user context."""
        return self.get_or_create(ContextNamespace.USER, key)

    def get_post_context(
        self, key: str, topic_hint: str | None = None
    ) -> ConversationContext:
        """Fetch or create a post context, optionally overriding its topic."""
        return self.get_or_create(ContextNamespace.POST, key, topic_hint)

    def touch(self, context: ConversationContext) -> None:
        """Mark a context as used now."""
        context.last_interaction = self._clock()

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    def sweep(self, now: datetime | None = None) -> int:
        """Evict contexts idle for longer than their TTL.

        Active conversations use the active TTL, everything else the base TTL.

        Args:
            now: Reference time. Defaults to the store's clock.

        Returns:
            Number of evicted contexts.
        """
        now = now or self._clock()
        evicted = 0
        with self._lock:
            for mapping in self._contexts.values():
                expired = [
                    key
                    for key, context in mapping.items()
                    if now - context.last_interaction > self._ttl_for(context)
                ]
                for key in expired:
                    del mapping[key]
                evicted += len(expired)

        counts = self.count_active()
        logger.info(
            "[%s] Active contexts: %d users, %d posts (evicted %d)",
            self._name,
            counts.users,
            counts.posts,
            evicted,
        )
        return evicted

    def count_active(self) -> ActiveContextCounts:
        """Return the size of each namespace."""
        with self._lock:
            return ActiveContextCounts(
                users=len(self._contexts[ContextNamespace.USER]),
                posts=len(self._contexts[ContextNamespace.POST]),
            )

    def _ttl_for(self, context: ConversationContext) -> timedelta:
        return self._active_ttl if context.is_active_conversation else self._base_ttl
