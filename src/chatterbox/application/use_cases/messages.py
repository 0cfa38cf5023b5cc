"""User-facing fixed messages and text guards shared by the use cases."""

RATE_LIMITED_MESSAGE = "Sorry, I'm a bit overloaded right now. Try again in a minute."
TIMEOUT_MESSAGE = "Sorry, that took too long. Try asking a shorter question."
GENERIC_ERROR_MESSAGE = "Oops, something went wrong 🤖 Technical problems, try later."
POST_COMMENT_ERROR_MESSAGE = "Can't comment on this post 🤔"
UNCLEAR_REPLY_MESSAGE = (
    "Sorry, I can't come up with a proper answer. Could you clarify the question?"
)

TRUNCATED_INPUT_NOTE = "... [text shortened because of its length]"
TRUNCATED_REPLY_NOTE = "\n\n[Reply cut because it was too long]"

MIN_REPLY_LENGTH = 5
TRUNCATED_REPLY_LENGTH = 4000


def truncate_text(text: str, max_length: int) -> str:
    """Cut a text to `max_length` characters, appending a note if cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATED_INPUT_NOTE
