"""Text utility functions for script processing."""

# This module is part of shorts_factory.utils package

import re

# Runs of sentence-terminal punctuation, including the Arabic-script question mark.
_SENTENCE_END_RE = re.compile(r"[.!?؟…]+")


def split_sentences(text: str) -> list[str]:
    """
    Split text into trimmed sentences, dropping empty fragments.

    Args:
        text: Input text.

    Returns:
        Sentences without their terminal punctuation.
    """
    return [part.strip() for part in _SENTENCE_END_RE.split(text or "") if part.strip()]


def wrap_words(text: str, max_chars: int) -> list[str]:
    """
    Greedy word wrap.

    Args:
        text: Text to wrap.
        max_chars: Maximum characters per line; longer single words get a line of their own.

    Returns:
        Wrapped lines (empty list for blank text).
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines
