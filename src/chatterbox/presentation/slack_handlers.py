"""Slack event handlers."""

import logging
from typing import Any

from slack_bolt.async_app import AsyncApp

from chatterbox.application.handlers import MessageHandler
from chatterbox.infrastructure.slack import SlackEventAdapter

logger = logging.getLogger(__name__)

# Message subtypes that carry new content
HANDLED_SUBTYPES = frozenset({None, "bot_message", "thread_broadcast", "file_share"})


def register_handlers(
    app: AsyncApp,
    message_handler: MessageHandler,
    event_adapter: SlackEventAdapter,
    name: str = "",
) -> None:
    """Register Slack event handlers.

    Args:
        app: AsyncApp instance.
        message_handler: Handler routing inbound messages.
        event_adapter: Adapter for converting events to entities.
        name: Bot name used in log messages.
    """

    @app.event("app_mention")
    async def handle_app_mention(event: dict[str, Any]) -> None:
        """Handle app_mention events (no-op).

        This handler exists to acknowledge app_mention events and suppress
        slack-bolt warnings. The actual processing is done by handle_message
        which receives the same message event.
        """
        logger.debug("[%s] Received app_mention event: %s", name, event.get("ts"))

    @app.event("message")
    async def handle_message(event: dict[str, Any]) -> None:
        """Handle message events.

        Args:
            event: Slack event payload.
        """
        subtype = event.get("subtype")
        if subtype not in HANDLED_SUBTYPES:
            return

        logger.debug(
            "[%s] Processing message event: ts=%s, subtype=%s, channel=%s",
            name,
            event.get("ts"),
            subtype,
            event.get("channel"),
        )

        try:
            message = await event_adapter.to_inbound_message(event)
        except Exception:
            logger.exception("[%s] Error converting event to message", name)
            return

        await message_handler.handle(message)

    @app.error
    async def handle_error(error: Exception) -> None:
        """Log errors that escaped the handlers."""
        logger.error("[%s] Unhandled error: %s", name, error)
