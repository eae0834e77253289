"""Rule-based extractive summarization engine."""

from __future__ import annotations

from typing import List

from newsdigest.config import Settings
from newsdigest.summarizer.engines.base import SummarizationEngine
from newsdigest.summarizer.models import EngineResult
from newsdigest.summarizer.text import split_sentences


def representative_indices(sentence_count: int) -> List[int]:
    """First, two evenly spaced interior, and last sentence positions."""
    n = sentence_count
    indices = sorted({0, n // 3, (2 * n) // 3, n - 1})
    if len(indices) >= n > 2:
        # Always drop at least one sentence.
        del indices[-2]
    return indices


def rule_based_summary(text: str, threshold: int = 3) -> str:
    """
    Pick representative sentences spread across the text.

    Texts with ``threshold`` sentences or fewer are returned unchanged.
    """
    sentences = split_sentences(text)
    if len(sentences) <= threshold:
        return text
    picked = [sentences[index] for index in representative_indices(len(sentences))]
    return ". ".join(picked) + "."


class ExtractiveEngine(SummarizationEngine):
    name = "extractive"

    async def summarize(self, text: str, settings: Settings) -> EngineResult:
        summary = rule_based_summary(text, settings.extractive_sentence_threshold)
        return EngineResult(text=summary, engine=self.name)
