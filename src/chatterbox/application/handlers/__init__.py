"""Message handlers package."""

from chatterbox.application.handlers.message_handler import MessageHandler

__all__ = ["MessageHandler"]
