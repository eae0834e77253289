# newsdigest/summarizer/engines/remote.py
"""
Remote abstractive summarization engine.

Long texts are cut into word windows that fit the backend's per-call
ceiling, each window is summarized in document order, and the merged
chunk summaries are fed back through the same pass until they fit the
ceiling or the pass budget runs out.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import anyio

from newsdigest.config import Settings
from newsdigest.summarizer.backends import SummaryBackend
from newsdigest.summarizer.engines.base import SummarizationEngine
from newsdigest.summarizer.engines.extractive import rule_based_summary
from newsdigest.summarizer.errors import BackendUnavailable, ChunkSummaryFailed
from newsdigest.summarizer.models import EngineResult
from newsdigest.summarizer.text import chunk_words, truncate_words, word_count

logger = logging.getLogger(__name__)


def failure_placeholder(index: int, total: int) -> str:
    return f"[Summary unavailable for part {index + 1} of {total}.]"


class RemoteAbstractiveEngine(SummarizationEngine):
    """
    Chunk, summarize, merge and re-summarize through a ``SummaryBackend``.

    A chunk whose call fails contributes a placeholder instead of aborting
    the request; ``BackendUnavailable`` aborts so the caller can fall back.
    """

    name = "remote"

    def __init__(self, backend: SummaryBackend):
        self.backend = backend

    async def summarize(self, text: str, settings: Settings) -> EngineResult:
        max_words = settings.remote_max_words
        current = text
        calls = 0
        passes = 0

        while passes < settings.remote_max_passes:
            passes += 1
            current, issued = await self._summarize_pass(current, settings)
            calls += issued
            if word_count(current) <= max_words:
                break
        else:
            logger.warning(
                f"Remote summary still {word_count(current)} words after "
                f"{passes} passes; condensing locally"
            )
            current = truncate_words(
                rule_based_summary(current, settings.extractive_sentence_threshold),
                max_words,
            )

        if not current.strip():
            raise BackendUnavailable("remote summarization produced no text")
        return EngineResult(text=current, engine=self.name, calls=calls, passes=passes)

    async def _summarize_pass(self, text: str, settings: Settings) -> tuple[str, int]:
        chunks = chunk_words(text, settings.remote_max_words)
        if not chunks:
            return "", 0

        if settings.remote_chunk_concurrency > 1 and len(chunks) > 1:
            summaries = await self._summarize_concurrently(
                chunks, settings.remote_chunk_concurrency
            )
        else:
            summaries = [
                await self._summarize_one(chunk, index, len(chunks))
                for index, chunk in enumerate(chunks)
            ]

        failed = sum(1 for summary in summaries if summary is None)
        if failed == len(chunks):
            raise BackendUnavailable(f"all {len(chunks)} chunk calls failed")
        if failed:
            logger.warning(f"{failed} of {len(chunks)} chunk summaries failed")

        merged = " ".join(
            summary if summary is not None else failure_placeholder(index, len(chunks))
            for index, summary in enumerate(summaries)
        )
        return merged, len(chunks)

    async def _summarize_one(self, chunk: str, index: int, total: int) -> Optional[str]:
        try:
            return await self.backend.summarize_chunk(chunk)
        except ChunkSummaryFailed as exc:
            logger.warning(f"Chunk {index + 1}/{total} failed: {exc}")
            return None

    async def _summarize_concurrently(
        self, chunks: List[str], concurrency: int
    ) -> List[Optional[str]]:
        results: List[Optional[str]] = [None] * len(chunks)
        unavailable: List[BackendUnavailable] = []
        limiter = anyio.CapacityLimiter(concurrency)

        async def worker(index: int, chunk: str) -> None:
            async with limiter:
                if unavailable:
                    return
                try:
                    results[index] = await self._summarize_one(chunk, index, len(chunks))
                except BackendUnavailable as exc:
                    unavailable.append(exc)

        async with anyio.create_task_group() as tg:
            for index, chunk in enumerate(chunks):
                tg.start_soon(worker, index, chunk)

        if unavailable:
            raise unavailable[0]
        return results
