"""Video metadata extraction through the YouTube Data API."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import httpx

from newsdigest.config import Settings
from newsdigest.summarizer.errors import EmptyContent, InvalidReference, LookupFailed
from newsdigest.summarizer.extractors.base import SourceExtractor
from newsdigest.summarizer.models import RawInput, SourceKind
from newsdigest.summarizer.text import normalize

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERNS = (
    re.compile(r"[?&]v=([^&#\s]+)"),
    re.compile(r"youtu\.be/([^?&#/\s]+)"),
    re.compile(r"youtube(?:-nocookie)?\.com/(?:embed|shorts)/([^?&#/\s]+)"),
)


def parse_video_id(reference: str) -> Optional[str]:
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(reference)
        if match:
            return match.group(1)
    return None


def snippet_text(snippet: Dict[str, Any]) -> str:
    parts = (normalize(snippet.get("title")), normalize(snippet.get("description")))
    return ". ".join(part for part in parts if part)


class VideoMetadataExtractor(SourceExtractor):
    kind = SourceKind.VIDEO

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(settings)
        self.transport = transport

    async def extract(self, raw: RawInput) -> str:
        reference = normalize(raw)
        video_id = parse_video_id(reference)
        if not video_id:
            raise InvalidReference(f"no video id in {reference!r}")

        snippet = await self._lookup_snippet(video_id)
        text = snippet_text(snippet)
        if not text.strip(" ."):
            raise EmptyContent(f"video {video_id} has no title or description")
        return text

    async def _lookup_snippet(self, video_id: str) -> Dict[str, Any]:
        if not self.settings.youtube_api_key:
            logger.warning("YouTube API key not configured, skipping lookup")
            raise LookupFailed("missing api key")

        params = {
            "part": "snippet",
            "id": video_id,
            "key": self.settings.youtube_api_key,
        }
        timeout = httpx.Timeout(self.settings.http_timeout_seconds)
        try:
            async with httpx.AsyncClient(
                timeout=timeout, transport=self.transport
            ) as client:
                response = await client.get(self.settings.youtube_api_url, params=params)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            # 403 is how the catalog reports quota exhaustion.
            logger.warning(
                f"Video lookup returned {exc.response.status_code} for {video_id}"
            )
            raise LookupFailed(f"status {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Video lookup failed for {video_id}: {exc!r}")
            raise LookupFailed(str(exc)) from exc

        items = body.get("items") if isinstance(body, dict) else None
        if not items or not isinstance(items[0], dict):
            raise LookupFailed(f"video {video_id} not found")
        snippet = items[0].get("snippet")
        if not isinstance(snippet, dict):
            raise LookupFailed(f"video {video_id} has no snippet")
        return snippet
