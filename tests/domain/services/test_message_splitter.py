"""Tests for split_message."""

import re

from chatterbox.domain.services import split_message

PREFIX = re.compile(r"^\((\d+)/(\d+)\) ")


class TestSplitMessage:
    """split_message tests."""

    def test_short_text_unchanged(self) -> None:
        """Test that a text within the limit is returned as one part."""
        assert split_message("hello", max_length=100) == ["hello"]

    def test_text_at_limit_unchanged(self) -> None:
        """Test that a text of exactly max_length is not split."""
        text = "a" * 100

        assert split_message(text, max_length=100) == [text]

    def test_splits_on_sentences(self) -> None:
        """Test that sentences are packed into numbered parts."""
        sentence = "A" * 39 + "."
        text = " ".join([sentence, sentence, sentence])

        parts = split_message(text, max_length=100)

        assert parts == [
            f"(1/3) {sentence}",
            f"(2/3) {sentence}",
            f"(3/3) {sentence}",
        ]

    def test_packs_short_sentences_together(self) -> None:
        """Test that several short sentences share one part."""
        text = " ".join(["Short one."] * 20)

        parts = split_message(text, max_length=100)

        assert len(parts) > 1
        assert all(part.count("Short one.") > 1 for part in parts)

    def test_parts_respect_limit(self) -> None:
        """Test that every part fits the limit."""
        text = " ".join(f"Sentence number {i} is here." for i in range(200))

        parts = split_message(text, max_length=200)

        assert all(len(part) <= 200 for part in parts)
        total = len(parts)
        for index, part in enumerate(parts, start=1):
            match = PREFIX.match(part)
            assert match is not None
            assert (int(match.group(1)), int(match.group(2))) == (index, total)

    def test_hard_splits_long_sentence(self) -> None:
        """Test that a sentence longer than the limit gets continuations."""
        text = "x" * 200

        parts = split_message(text, max_length=100)

        assert len(parts) == 3
        assert all(len(part) <= 100 for part in parts)
        assert parts[0].endswith("...")
        assert parts[1].startswith("(2/3) ...")
        assert parts[1].endswith("...")
        assert parts[2].startswith("(3/3) ...")
        assert sum(part.count("x") for part in parts) == 200

    def test_keeps_all_words(self) -> None:
        """Test that no content is lost when splitting on sentences."""
        text = "\n".join(f"Line {i}." for i in range(100))

        parts = split_message(text, max_length=120)
        contents = " ".join(PREFIX.sub("", part) for part in parts)

        for i in range(100):
            assert f"Line {i}." in contents
