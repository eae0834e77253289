"""PDF text extraction backed by PyPDF2."""

from __future__ import annotations

import io
import logging
from typing import List

import anyio
from PyPDF2 import PdfReader

from newsdigest.summarizer.errors import EmptyContent, UnreadableDocument
from newsdigest.summarizer.extractors.base import SourceExtractor
from newsdigest.summarizer.models import RawInput, SourceKind
from newsdigest.summarizer.text import normalize

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def read_pdf_pages(data: bytes) -> List[str]:
    """Return the text of each page in page order."""
    reader = PdfReader(io.BytesIO(data))
    if reader.is_encrypted and not reader.decrypt(""):
        raise UnreadableDocument("document is password protected")
    return [page.extract_text() or "" for page in reader.pages]


class DocumentExtractor(SourceExtractor):
    kind = SourceKind.DOCUMENT

    async def extract(self, raw: RawInput) -> str:
        if not isinstance(raw, (bytes, bytearray)) or not raw:
            raise UnreadableDocument("document payload must be non-empty bytes")

        try:
            pages = await anyio.to_thread.run_sync(read_pdf_pages, bytes(raw))
        except UnreadableDocument:
            raise
        except Exception as exc:
            logger.warning(f"PDF backend rejected document: {exc!r}")
            raise UnreadableDocument(str(exc)) from exc

        text = normalize(PAGE_SEPARATOR.join(pages))
        if not text:
            # Typically a scanned, image-only document.
            raise EmptyContent(f"no extractable text in {len(pages)} page(s)")
        return text
