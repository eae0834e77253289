"""Stateless single-turn news assistant."""

from __future__ import annotations

import logging
from typing import Optional

from newsdigest.config import Settings, get_settings
from newsdigest.llm import LLMProvider, build_llm_provider, strip_reasoning
from newsdigest.summarizer.errors import RemoteUnavailable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful news assistant. Answer clearly and concisely."
UNAVAILABLE_REPLY = "The assistant is unavailable right now. Please try again later."


def build_user_turn(message: str, context: Optional[str] = None) -> str:
    context = (context or "").strip()
    if context:
        return f"Context: {context}\nUser: {message}"
    return message


async def converse(
    message: str,
    context: Optional[str] = None,
    settings: Settings | None = None,
    provider: LLMProvider | None = None,
) -> str:
    settings = settings or get_settings()
    provider = provider or build_llm_provider(settings)
    if provider is None:
        return UNAVAILABLE_REPLY

    try:
        reply = await provider.complete(
            SYSTEM_PROMPT,
            build_user_turn(message, context),
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
    except RemoteUnavailable as exc:
        logger.warning(f"Chat model unavailable: {exc}")
        return UNAVAILABLE_REPLY
    except Exception:
        logger.error("Unexpected chat error", exc_info=True)
        return UNAVAILABLE_REPLY

    return strip_reasoning(reply) or UNAVAILABLE_REPLY
