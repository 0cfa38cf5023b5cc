"""Application services."""

from chatterbox.application.services.context_sweeper import ContextSweeper

__all__ = ["ContextSweeper"]
