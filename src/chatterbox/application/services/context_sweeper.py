"""Periodic TTL sweep of conversation contexts."""

import asyncio
import logging

from chatterbox.domain.services import ContextStore

logger = logging.getLogger(__name__)


class ContextSweeper:
    """Periodic sweep service.

    Calls ContextStore.sweep at a fixed interval, independent of message
    traffic, so contexts nobody queries again are still reclaimed.
    Runs as an asyncio task and gracefully shuts down on stop signal.
    """

    def __init__(
        self,
        context_store: ContextStore,
        interval_seconds: float,
        name: str = "",
    ) -> None:
        """Initialize ContextSweeper.

        Args:
            context_store: Store to sweep.
            interval_seconds: Seconds between sweeps.
            name: Bot name used in log messages.
        """
        self._context_store = context_store
        self._interval = interval_seconds
        self._name = name
        # _stop_event uses inverted logic:
        # - set() means "stop signal active" (not running)
        # - clear() means "no stop signal" (running)
        # Initially stopped.
        self._stop_event = asyncio.Event()
        self._stop_event.set()

    async def start(self) -> None:
        """Start periodic sweeping.

        The first sweep happens one interval after start. Continues looping
        until stop signal is received.
        """
        if not self._stop_event.is_set():
            logger.warning(
                "ContextSweeper.start() called while already running; ignoring."
            )
            return
        self._stop_event.clear()
        logger.info(
            "[%s] Context cleanup scheduled every %d minutes",
            self._name,
            self._interval // 60,
        )

        while not self._stop_event.is_set():
            # Wait for stop signal or timeout
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=self._interval,
                )
                break  # Stop signal received
            except asyncio.TimeoutError:
                pass

            try:
                self._context_store.sweep()
            except Exception as e:
                logger.error("[%s] Context sweep failed: %s", self._name, e)

    async def stop(self) -> None:
        """Signal periodic sweeping to stop."""
        self._stop_event.set()

    @property
    def is_running(self) -> bool:
        """Check if the sweeper is running."""
        return not self._stop_event.is_set()
