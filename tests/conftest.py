"""Pytest configuration for tests."""

from typing import List

import pytest

from newsdigest.config import get_settings
from newsdigest.llm import LLMProvider
from newsdigest.summarizer.errors import RemoteUnavailable


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def settings():
    """Settings with every remote credential cleared."""
    return get_settings().model_copy(
        update={
            "summarizer_engine": "extractive",
            "remote_fallback_to_extractive": True,
            "remote_chunk_concurrency": 1,
            "huggingface_api_key": None,
            "youtube_api_key": None,
            "openai_api_key": None,
            "anthropic_api_key": None,
            "llm_provider": "none",
            "web_renderer": "http",
            "trust_classifier_mode": "heuristic",
            "trusted_sources_path": None,
        }
    )


class FakeProvider(LLMProvider):
    """Chat provider returning a canned reply and recording every prompt."""

    model = "fake"

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: List[dict] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        json_mode: bool = False,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> str:
        self.prompts.append(
            {"system": system_prompt, "user": user_prompt, "json_mode": json_mode}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def unavailable_provider():
    return FakeProvider(error=RemoteUnavailable("connection refused"))
