"""Deterministic topic heuristics."""

import re

DEFAULT_TOPIC = "General topic"

# Up to 50 characters ending at the first sentence terminator, else 50 chars.
_TOPIC_PATTERN = re.compile(r"^(.{1,50}?)[.!?]|^(.{1,50})")

_QUOTE_CHARS = "\"'."


def heuristic_topic(text: str, fallback: str = DEFAULT_TOPIC) -> str:
    """Derive a topic from the beginning of a text.

    Leading and trailing whitespace is ignored. Returns the first
    sentence (terminator included) when it fits in 50 characters,
    otherwise the first 50 characters.

    Args:
        text: Source text.
        fallback: Label for empty text.

    Returns:
        Topic label.
    """
    match = _TOPIC_PATTERN.match(text.strip())
    if match is None:
        return fallback
    return match.group(0)


def clean_topic(raw: str) -> str:
    """Strip whitespace and surrounding quote/period characters."""
    return raw.strip().strip(_QUOTE_CHARS).strip()
