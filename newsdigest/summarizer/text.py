"""Whitespace normalization, sentence splitting and word-window chunking."""

from __future__ import annotations

import re
from typing import Any, List

_SENTENCE_BOUNDARY = re.compile(r"[.!?]")


def normalize(value: Any) -> str:
    """Collapse whitespace runs to a single space and trim both ends."""
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())


def split_sentences(text: str) -> List[str]:
    sentences = (part.strip() for part in _SENTENCE_BOUNDARY.split(text))
    return [sentence for sentence in sentences if sentence]


def word_count(text: str) -> int:
    return len(text.split())


def truncate_words(text: str, max_words: int) -> str:
    words = text.split()
    return " ".join(words[:max_words])


def chunk_words(text: str, max_words: int) -> List[str]:
    """
    Split normalized text into ordered windows of at most ``max_words`` words.

    Every word lands in exactly one chunk, in its original order. Empty text
    yields no chunks.
    """
    if max_words < 1:
        raise ValueError("max_words must be at least 1")
    words = text.split()
    return [
        " ".join(words[start : start + max_words])
        for start in range(0, len(words), max_words)
    ]
