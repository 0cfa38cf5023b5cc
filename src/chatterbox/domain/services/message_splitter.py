"""Outbound message chunking."""

import re

# Split after sentence terminators or line breaks, consuming the whitespace.
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!\n])\s+")

# Room kept for the "(i/N) " prefix and continuation dots.
PART_MARGIN = 30
CONTINUATION = "..."


def split_message(text: str, max_length: int = 4096) -> list[str]:
    """Split a text into parts that fit the platform message limit.

    Sentences are packed greedily; a sentence longer than the limit is cut
    into pieces joined by "..." continuations. When more than one part is
    produced each part is prefixed with "(i/N) ".

    Args:
        text: Text to split.
        max_length: Maximum length of one message.

    Returns:
        Message parts in order. A text that fits is returned unchanged.
    """
    if len(text) <= max_length:
        return [text]

    budget = max(max_length - PART_MARGIN, 2 * len(CONTINUATION) + 1)
    parts: list[str] = []
    current = ""

    for sentence in _SENTENCE_BOUNDARY.split(text):
        if not sentence:
            continue
        if len(current) + len(sentence) + 1 <= budget:
            current = f"{current} {sentence}" if current else sentence
            continue

        if current:
            parts.append(current.strip())
            current = ""

        if len(sentence) <= budget:
            current = sentence
            continue

        remaining = sentence
        while remaining:
            chunk = remaining[:budget]
            remaining = remaining[budget:]
            if remaining:
                parts.append(chunk + CONTINUATION)
                remaining = CONTINUATION + remaining
            else:
                current = chunk

    if current.strip():
        parts.append(current.strip())

    if len(parts) > 1:
        total = len(parts)
        parts = [f"({i}/{total}) {part}" for i, part in enumerate(parts, start=1)]
    return parts
