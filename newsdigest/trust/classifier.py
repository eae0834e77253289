"""Trust ("fake news") classification: allowlist first, then heuristics or a remote model."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple

from newsdigest.config import Settings, get_settings
from newsdigest.llm import LLMProvider, build_llm_provider, strip_reasoning
from newsdigest.summarizer.errors import RemoteUnavailable
from newsdigest.summarizer.text import normalize, truncate_words, word_count
from newsdigest.trust.lexicon import get_trust_lexicon
from newsdigest.trust.models import TrustVerdict, VerdictDecodeError, cap_reasoning, parse_verdict

logger = logging.getLogger(__name__)

ALLOWLIST_CONFIDENCE = 0.95
SHORT_TEXT_CONFIDENCE = 0.2
SENSATIONAL_CONFIDENCE = 0.25
UNKNOWN_SOURCE_CONFIDENCE = 0.4
REMOTE_INPUT_MAX_WORDS = 800

UNAVAILABLE_REASONING = "Trust classification is unavailable right now."

CLASSIFIER_SYSTEM_PROMPT = """You are a news credibility analyst. Judge whether the user's text reads like trustworthy news reporting or like misinformation.

Return STRICT JSON:
{
  "is_trusted": boolean,
  "confidence": number between 0 and 1,
  "reasoning": string, at most two sentences
}
Do not include anything outside the JSON object."""


@lru_cache(maxsize=8)
def _compile_matchers(terms: FrozenSet[str]) -> Tuple[Tuple[str, re.Pattern[str]], ...]:
    # Longest terms first; ties sorted for determinism.
    ordered = sorted(terms, key=lambda term: (-len(term), term))
    return tuple(
        (term, re.compile(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])"))
        for term in ordered
    )


def match_trusted_source(lowered: str, sources: FrozenSet[str]) -> Optional[str]:
    # Longest names first so "livemint" wins over "mint".
    for source in sorted(sources, key=lambda term: (-len(term), term)):
        if source in lowered:
            return source
    return None


def find_sensational_tokens(lowered: str, tokens: FrozenSet[str]) -> List[str]:
    return [token for token, pattern in _compile_matchers(tokens) if pattern.search(lowered)]


def unavailable_verdict() -> TrustVerdict:
    return TrustVerdict(
        is_trusted=False,
        confidence=0.0,
        reasoning=UNAVAILABLE_REASONING,
        method="unavailable",
    )


def heuristic_verdict(lowered: str, tokens: FrozenSet[str], settings: Settings) -> TrustVerdict:
    found = find_sensational_tokens(lowered, tokens)
    if found:
        listed = ", ".join(f'"{token}"' for token in found[:3])
        return TrustVerdict(
            is_trusted=False,
            confidence=SENSATIONAL_CONFIDENCE,
            reasoning=cap_reasoning(
                f"Sensationalist language detected: {listed}.",
                settings.trust_reasoning_max_chars,
            ),
            method="heuristic",
        )

    if word_count(lowered) < settings.trust_min_words:
        return TrustVerdict(
            is_trusted=False,
            confidence=SHORT_TEXT_CONFIDENCE,
            reasoning="Text is too short to assess and names no trusted source.",
            method="heuristic",
        )

    return TrustVerdict(
        is_trusted=False,
        confidence=UNKNOWN_SOURCE_CONFIDENCE,
        reasoning="Source not found in trusted list.",
        method="heuristic",
    )


async def remote_verdict(text: str, provider: LLMProvider, settings: Settings) -> TrustVerdict:
    raw = await provider.complete(
        CLASSIFIER_SYSTEM_PROMPT,
        truncate_words(text, REMOTE_INPUT_MAX_WORDS),
        json_mode=True,
        max_tokens=settings.llm_max_tokens,
        temperature=0.0,
    )
    return parse_verdict(strip_reasoning(raw), settings.trust_reasoning_max_chars)


async def classify_trust(
    text: str,
    settings: Settings | None = None,
    provider: LLMProvider | None = None,
) -> TrustVerdict:
    """
    Classify text as trusted or not.

    A trusted publisher named in the text always wins and needs no network
    access. Never raises: failures produce the "unavailable" verdict.
    """
    settings = settings or get_settings()
    try:
        lexicon = get_trust_lexicon(settings.trusted_sources_path)
    except Exception:
        logger.error("Trust lexicon could not be loaded", exc_info=True)
        return unavailable_verdict()

    normalized = normalize(text)
    lowered = normalized.lower()

    source = match_trusted_source(lowered, lexicon.trusted_sources)
    if source:
        return TrustVerdict(
            is_trusted=True,
            confidence=ALLOWLIST_CONFIDENCE,
            reasoning=f"Content from trusted source: {source}",
            method="allowlist",
            source=source,
        )

    if settings.trust_classifier_mode == "heuristic":
        return heuristic_verdict(lowered, lexicon.sensational_tokens, settings)

    if not normalized:
        return unavailable_verdict()

    provider = provider or build_llm_provider(settings)
    if provider is None:
        logger.warning("Remote trust classification requested but no LLM provider is configured")
        return unavailable_verdict()

    try:
        return await remote_verdict(normalized, provider, settings)
    except RemoteUnavailable as exc:
        logger.warning(f"Remote trust classification unavailable: {exc}")
    except VerdictDecodeError as exc:
        logger.warning(f"Remote trust classification reply rejected: {exc}")
    except Exception:
        logger.error("Unexpected trust classification error", exc_info=True)
    return unavailable_verdict()
