import json

import httpx
import pytest

from newsdigest.summarizer.backends import (
    HuggingFaceBackend,
    LLMSummaryBackend,
    build_summary_backend,
)
from newsdigest.summarizer.errors import BackendUnavailable, ChunkSummaryFailed


def _backend(handler, api_key="hf_test"):
    return HuggingFaceBackend(
        api_key=api_key,
        model="facebook/bart-large-cnn",
        api_url="https://hf.test/models/",
        min_length=10,
        max_length=60,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.anyio
async def test_huggingface_backend_returns_summary_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"summary_text": "  A short\nsummary. "}])

    summary = await _backend(handler).summarize_chunk("long input text")

    assert summary == "A short summary."
    assert seen["url"] == "https://hf.test/models/facebook/bart-large-cnn"
    assert seen["auth"] == "Bearer hf_test"
    assert seen["body"]["inputs"] == "long input text"
    assert seen["body"]["parameters"] == {
        "min_length": 10,
        "max_length": 60,
        "do_sample": False,
    }


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [401, 403, 429])
async def test_huggingface_refusals_are_backend_unavailable(status_code):
    backend = _backend(lambda request: httpx.Response(status_code, json={"error": "no"}))
    with pytest.raises(BackendUnavailable):
        await backend.summarize_chunk("text")


@pytest.mark.anyio
async def test_huggingface_timeout_is_backend_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(BackendUnavailable):
        await _backend(handler).summarize_chunk("text")


@pytest.mark.anyio
async def test_huggingface_missing_key_never_calls_out():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[{"summary_text": "x"}])

    with pytest.raises(BackendUnavailable):
        await _backend(handler, api_key=None).summarize_chunk("text")
    assert calls == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "model crashed"}),
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json=[{"summary_text": "   "}]),
        httpx.Response(200, json={"unexpected": True}),
    ],
)
async def test_huggingface_bad_replies_fail_only_the_chunk(response):
    with pytest.raises(ChunkSummaryFailed):
        await _backend(lambda request: response).summarize_chunk("text")


@pytest.mark.anyio
async def test_llm_backend_strips_reasoning(fake_provider):
    provider = fake_provider(reply="<think>planning...</think>\nThe gist.")
    summary = await LLMSummaryBackend(provider).summarize_chunk("chunk text")
    assert summary == "The gist."
    assert provider.prompts[0]["user"] == "chunk text"


@pytest.mark.anyio
async def test_llm_backend_maps_transport_failure(unavailable_provider):
    with pytest.raises(BackendUnavailable):
        await LLMSummaryBackend(unavailable_provider).summarize_chunk("chunk text")


@pytest.mark.anyio
async def test_llm_backend_empty_reply_fails_chunk(fake_provider):
    with pytest.raises(ChunkSummaryFailed):
        await LLMSummaryBackend(fake_provider(reply="  ")).summarize_chunk("chunk")


def test_build_summary_backend_selection(settings):
    assert isinstance(build_summary_backend(settings), HuggingFaceBackend)
    llm_settings = settings.model_copy(update={"remote_summary_backend": "llm"})
    # no provider configured
    assert build_summary_backend(llm_settings) is None
