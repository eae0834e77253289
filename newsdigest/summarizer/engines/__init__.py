"""Summarization engines: local extractive and remote abstractive."""

from newsdigest.summarizer.engines.base import SummarizationEngine
from newsdigest.summarizer.engines.extractive import ExtractiveEngine, rule_based_summary
from newsdigest.summarizer.engines.remote import RemoteAbstractiveEngine

__all__ = [
    "ExtractiveEngine",
    "RemoteAbstractiveEngine",
    "SummarizationEngine",
    "rule_based_summary",
]
