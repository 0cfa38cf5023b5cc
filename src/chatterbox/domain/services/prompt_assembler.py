"""Prompt assembly for the completion API."""

from chatterbox.domain.entities import ConversationContext, Role

DEFAULT_REMINDER_TEXT = (
    "Remember your role and stick to the communication style you were given."
)
DEFAULT_TOPIC_TEMPLATE = "Current discussion topic: {topic}"
POST_TEXT_PLACEHOLDER = "{postText}"


def _entry(role: Role, content: str) -> dict[str, str]:
    return {"role": role.value, "content": content}


class PromptAssembler:
    """Builds the ordered message list sent to the completion API.

    Order is: static system prompt, optional role reminder, optional topic,
    then the newest `relevant_history_length` history entries. The context
    is only read.
    """

    def __init__(
        self,
        system_prompt: str,
        relevant_history_length: int = 10,
        reminder_interval: int = 10,
        reminder_text: str = DEFAULT_REMINDER_TEXT,
        topic_template: str = DEFAULT_TOPIC_TEMPLATE,
    ) -> None:
        """Initialize the assembler.

        Args:
            system_prompt: Static behavioural prompt of the bot.
            relevant_history_length: History window size.
            reminder_interval: Role reminder fires when the raw message
                counter is a positive multiple of this value.
            reminder_text: Content of the reminder entry.
            topic_template: Format string with a `{topic}` field.
        """
        self._system_prompt = system_prompt
        self._relevant_history_length = relevant_history_length
        self._reminder_interval = reminder_interval
        self._reminder_text = reminder_text
        self._topic_template = topic_template

    def needs_reminder(self, message_count: int) -> bool:
        """Check whether the role reminder is due for a message counter."""
        if self._reminder_interval <= 0:
            return False
        return message_count > 0 and message_count % self._reminder_interval == 0

    def build(self, context: ConversationContext) -> list[dict[str, str]]:
        """Assemble the prompt for a conversation context.

        Args:
            context: Conversation context.

        Returns:
            OpenAI-format message list.
        """
        messages = [_entry(Role.SYSTEM, self._system_prompt)]

        if self.needs_reminder(context.message_count):
            messages.append(_entry(Role.SYSTEM, self._reminder_text))

        if context.topic:
            messages.append(
                _entry(Role.SYSTEM, self._topic_template.format(topic=context.topic))
            )

        messages.extend(
            message.to_dict()
            for message in context.recent_history(self._relevant_history_length)
        )
        return messages

    def build_post_comment(
        self, post_text: str, template: str
    ) -> list[dict[str, str]]:
        """Assemble a single-shot prompt for commenting a channel post.

        Args:
            post_text: Text of the post.
            template: Comment template containing `{postText}`.

        Returns:
            System prompt followed by the filled-in template.
        """
        return [
            _entry(Role.SYSTEM, self._system_prompt),
            _entry(Role.USER, template.replace(POST_TEXT_PLACEHOLDER, post_text)),
        ]
