"""Engine registry and the summarization pipeline entry point."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from newsdigest.config import Settings, get_settings
from newsdigest.summarizer.backends import build_summary_backend
from newsdigest.summarizer.engines.base import SummarizationEngine
from newsdigest.summarizer.engines.extractive import ExtractiveEngine
from newsdigest.summarizer.engines.remote import RemoteAbstractiveEngine
from newsdigest.summarizer.errors import BackendUnavailable, ExtractionError
from newsdigest.summarizer.extractors import build_extractor
from newsdigest.summarizer.models import (
    EngineOption,
    EngineResult,
    SourceKind,
    SummarizationRequest,
    SummaryResult,
)
from newsdigest.summarizer.text import word_count

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Summarization failed due to an internal error."


class EngineRegistry:
    """Registry resolving engine names to the two available strategies."""

    def __init__(self) -> None:
        self._engines: Dict[str, SummarizationEngine] = {}
        self._settings: Optional[Settings] = None
        self.register(ExtractiveEngine())

    def _initialize_remote_engine(self, settings: Settings) -> None:
        backend = build_summary_backend(settings)
        if backend is None:
            logger.warning("No remote summary backend available, using extractive only")
            return
        self.register(RemoteAbstractiveEngine(backend))
        logger.info(f"Remote engine registered with {backend.name} backend")

    def register(self, engine: SummarizationEngine) -> None:
        self._engines[engine.name] = engine

    @property
    def extractive(self) -> SummarizationEngine:
        return self._engines["extractive"]

    def resolve(
        self, name: Optional[str], settings: Optional[Settings] = None
    ) -> SummarizationEngine:
        # Initialize the remote engine on first request if configured
        if settings and not self._settings:
            self._settings = settings
            if "remote" not in self._engines:
                self._initialize_remote_engine(settings)

        if name in self._engines:
            return self._engines[name]
        if name:
            logger.info(f"Engine {name!r} unavailable, using extractive")
        return self.extractive


registry = EngineRegistry()


def _failure(kind: SourceKind, message: str, code: str, **extra) -> SummaryResult:
    return SummaryResult(summary=message, ok=False, kind=kind, error=code, **extra)


async def _run_engine(
    engine: SummarizationEngine,
    fallback: SummarizationEngine,
    text: str,
    settings: Settings,
) -> tuple[EngineResult, bool]:
    try:
        return await engine.summarize(text, settings), False
    except BackendUnavailable as exc:
        if engine is fallback or not settings.remote_fallback_to_extractive:
            raise
        logger.warning(f"{engine.name} engine unavailable, falling back to extractive: {exc}")
        return await fallback.summarize(text, settings), True


async def summarize(
    request: SummarizationRequest,
    settings: Settings | None = None,
    engines: EngineRegistry | None = None,
) -> SummaryResult:
    """
    Extract, normalize and summarize one input.

    Never raises: every failure becomes a short user-facing message with
    ``ok=False`` and a stable error code.
    """
    settings = settings or get_settings()
    engines = engines or registry
    try:
        kind = SourceKind(request.kind)
    except ValueError:
        logger.warning(f"Unsupported source kind: {request.kind!r}")
        return _failure(SourceKind.TEXT, "Unsupported summarization type.", "unsupported_kind")

    try:
        extractor = build_extractor(kind, settings)
        text = await extractor.extract(request.payload)
    except ExtractionError as exc:
        logger.info(f"Extraction failed for {kind.value} input: {exc.code} ({exc})")
        return _failure(kind, exc.user_message, exc.code)
    except Exception:
        logger.error(f"Unexpected extraction error for {kind.value} input", exc_info=True)
        return _failure(kind, INTERNAL_ERROR_MESSAGE, "internal_error")

    engine = engines.resolve(request.engine or settings.summarizer_engine, settings)
    try:
        result, fallback_used = await _run_engine(engine, engines.extractive, text, settings)
    except BackendUnavailable as exc:
        logger.warning(f"Summarization backend unavailable: {exc}")
        return _failure(
            kind,
            BackendUnavailable.user_message,
            BackendUnavailable.code,
            engine=engine.name,
            word_count=word_count(text),
        )
    except Exception:
        logger.error("Unexpected summarization error", exc_info=True)
        return _failure(kind, INTERNAL_ERROR_MESSAGE, "internal_error", engine=engine.name)

    if not result.text.strip():
        return _failure(kind, "No readable text was found to summarize.", "empty_summary")

    return SummaryResult(
        summary=result.text,
        ok=True,
        kind=kind,
        engine=result.engine,
        fallback_used=fallback_used,
        calls=result.calls,
        passes=result.passes,
        word_count=word_count(text),
    )
