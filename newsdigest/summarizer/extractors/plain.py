"""Pass-through extractor for raw text input."""

from __future__ import annotations

from newsdigest.summarizer.errors import EmptyContent
from newsdigest.summarizer.extractors.base import SourceExtractor
from newsdigest.summarizer.models import RawInput, SourceKind
from newsdigest.summarizer.text import normalize


class PlainTextExtractor(SourceExtractor):
    kind = SourceKind.TEXT

    async def extract(self, raw: RawInput) -> str:
        text = normalize(raw)
        if not text:
            raise EmptyContent("no text supplied")
        return text
