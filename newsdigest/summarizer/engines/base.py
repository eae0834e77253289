"""Abstract base class for summarization engines."""

from __future__ import annotations

from abc import ABC, abstractmethod

from newsdigest.config import Settings
from newsdigest.summarizer.models import EngineOption, EngineResult


class SummarizationEngine(ABC):
    name: EngineOption

    @abstractmethod
    async def summarize(self, text: str, settings: Settings) -> EngineResult:
        """Summarize normalized text, raising ``SummarizationError`` on failure."""
