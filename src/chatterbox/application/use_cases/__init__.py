"""Use cases."""

from chatterbox.application.use_cases.comment_post import CommentPostUseCase
from chatterbox.application.use_cases.reply_to_mention import ReplyToMentionUseCase

__all__ = [
    "CommentPostUseCase",
    "ReplyToMentionUseCase",
]
