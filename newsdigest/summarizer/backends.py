"""Remote backends that turn one bounded chunk of text into a shorter summary."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from newsdigest.config import Settings
from newsdigest.llm import LLMProvider, build_llm_provider, strip_reasoning
from newsdigest.summarizer.errors import (
    BackendUnavailable,
    ChunkSummaryFailed,
    RemoteUnavailable,
)
from newsdigest.summarizer.text import normalize

logger = logging.getLogger(__name__)

# Authentication rejected, forbidden, rate limited.
UNAVAILABLE_STATUS_CODES = {401, 403, 429}

LLM_SUMMARY_PROMPT = (
    "You are a careful, factual summarizer. Summarize the user's text in a "
    "short paragraph. Use only the provided text and do not add facts. "
    "Reply with the summary only."
)


class SummaryBackend(ABC):
    name: str

    @abstractmethod
    async def summarize_chunk(self, text: str) -> str:
        """
        Summarize a chunk that fits the per-call word ceiling.

        Raises ``BackendUnavailable`` for transport-level failures and
        ``ChunkSummaryFailed`` when this one call produced nothing usable.
        """


class HuggingFaceBackend(SummaryBackend):
    """Hosted seq2seq summarization model behind the Hugging Face inference API."""

    name = "huggingface"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        api_url: str,
        *,
        min_length: int = 30,
        max_length: int = 150,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = f"{api_url.rstrip('/')}/{model}"
        self.min_length = min_length
        self.max_length = max_length
        self.timeout = timeout
        self.transport = transport

    async def summarize_chunk(self, text: str) -> str:
        if not self.api_key:
            raise BackendUnavailable("Hugging Face API key not configured")

        payload = {
            "inputs": text,
            "parameters": {
                "min_length": self.min_length,
                "max_length": self.max_length,
                "do_sample": False,
            },
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self.transport
            ) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning(f"Summarization backend unreachable: {exc!r}")
            raise BackendUnavailable(str(exc)) from exc

        if response.status_code in UNAVAILABLE_STATUS_CODES:
            logger.warning(f"Summarization backend refused call: {response.status_code}")
            raise BackendUnavailable(f"status {response.status_code}")
        if response.is_error:
            raise ChunkSummaryFailed(f"status {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise ChunkSummaryFailed("malformed response body") from exc

        if isinstance(body, list) and body and isinstance(body[0], dict):
            summary = normalize(body[0].get("summary_text"))
        elif isinstance(body, dict):
            summary = normalize(body.get("summary_text"))
        else:
            summary = ""
        if not summary:
            raise ChunkSummaryFailed("empty summary")
        return summary


class LLMSummaryBackend(SummaryBackend):
    """Summarizes chunks with the configured chat-completion provider."""

    name = "llm"

    def __init__(self, provider: LLMProvider, *, max_tokens: int = 500) -> None:
        self.provider = provider
        self.max_tokens = max_tokens

    async def summarize_chunk(self, text: str) -> str:
        try:
            reply = await self.provider.complete(
                LLM_SUMMARY_PROMPT,
                text,
                max_tokens=self.max_tokens,
                temperature=0.0,
            )
        except RemoteUnavailable as exc:
            raise BackendUnavailable(str(exc)) from exc

        summary = normalize(strip_reasoning(reply))
        if not summary:
            raise ChunkSummaryFailed("empty reply")
        return summary


def build_summary_backend(settings: Settings) -> Optional[SummaryBackend]:
    if settings.remote_summary_backend == "llm":
        provider = build_llm_provider(settings)
        if provider is None:
            return None
        return LLMSummaryBackend(provider, max_tokens=settings.llm_max_tokens)

    return HuggingFaceBackend(
        api_key=settings.huggingface_api_key,
        model=settings.huggingface_summary_model,
        api_url=settings.huggingface_api_url,
        min_length=settings.summary_min_length,
        max_length=settings.summary_max_length,
        timeout=settings.remote_timeout_seconds,
    )
