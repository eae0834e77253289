"""Abstract base class for source extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from newsdigest.config import Settings
from newsdigest.summarizer.models import RawInput, SourceKind


class SourceExtractor(ABC):
    kind: SourceKind

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    async def extract(self, raw: RawInput) -> str:
        """Return normalized text or raise an ``ExtractionError``."""
