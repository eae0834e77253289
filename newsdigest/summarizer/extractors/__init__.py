"""Source extractors, one per ``SourceKind``."""

from __future__ import annotations

from typing import Dict, Type

from newsdigest.config import Settings
from newsdigest.summarizer.extractors.base import SourceExtractor
from newsdigest.summarizer.extractors.document import DocumentExtractor
from newsdigest.summarizer.extractors.plain import PlainTextExtractor
from newsdigest.summarizer.extractors.video import VideoMetadataExtractor
from newsdigest.summarizer.extractors.web import WebPageExtractor
from newsdigest.summarizer.models import SourceKind

EXTRACTORS: Dict[SourceKind, Type[SourceExtractor]] = {
    SourceKind.TEXT: PlainTextExtractor,
    SourceKind.WEB: WebPageExtractor,
    SourceKind.DOCUMENT: DocumentExtractor,
    SourceKind.VIDEO: VideoMetadataExtractor,
}


def build_extractor(kind: SourceKind, settings: Settings) -> SourceExtractor:
    return EXTRACTORS[SourceKind(kind)](settings)


__all__ = [
    "EXTRACTORS",
    "DocumentExtractor",
    "PlainTextExtractor",
    "SourceExtractor",
    "VideoMetadataExtractor",
    "WebPageExtractor",
    "build_extractor",
]
