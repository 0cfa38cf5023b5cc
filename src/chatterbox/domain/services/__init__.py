"""Domain services."""

from chatterbox.domain.services.context_store import (
    ActiveContextCounts,
    ContextStore,
    post_context_key,
    user_context_key,
)
from chatterbox.domain.services.dispatch_policy import Dispatch, DispatchPolicy
from chatterbox.domain.services.message_splitter import split_message
from chatterbox.domain.services.prompt_assembler import PromptAssembler
from chatterbox.domain.services.protocols import (
    CompletionService,
    MessagingService,
    TopicInferrer,
)
from chatterbox.domain.services.topic import DEFAULT_TOPIC, clean_topic, heuristic_topic

__all__ = [
    "DEFAULT_TOPIC",
    "ActiveContextCounts",
    "CompletionService",
    "ContextStore",
    "Dispatch",
    "DispatchPolicy",
    "MessagingService",
    "PromptAssembler",
    "TopicInferrer",
    "clean_topic",
    "heuristic_topic",
    "post_context_key",
    "split_message",
    "user_context_key",
]
