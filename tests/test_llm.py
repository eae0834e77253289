import httpx
import orjson
import pytest

from newsdigest.llm import OllamaProvider, build_llm_provider, strip_reasoning
from newsdigest.summarizer.errors import RemoteUnavailable


@pytest.mark.anyio
async def test_ollama_generate_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = orjson.loads(request.content)
        return httpx.Response(200, json={"response": '{"is_trusted": true}', "done": True})

    provider = OllamaProvider(
        model="llama3.2",
        base_url="http://ollama.local:11434/",
        transport=httpx.MockTransport(handler),
    )
    reply = await provider.complete(
        "system", "user", json_mode=True, max_tokens=64, temperature=0.0
    )

    assert reply == '{"is_trusted": true}'
    assert seen["url"] == "http://ollama.local:11434/api/generate"
    assert seen["body"] == {
        "model": "llama3.2",
        "system": "system",
        "prompt": "user",
        "stream": False,
        "options": {"temperature": 0.0, "num_predict": 64},
        "format": "json",
    }


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="model not loaded"),
        httpx.Response(200, content=b"<html>proxy error</html>"),
    ],
)
async def test_ollama_failures_are_remote_unavailable(response):
    provider = OllamaProvider(transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(RemoteUnavailable):
        await provider.complete("system", "user")


@pytest.mark.anyio
async def test_ollama_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    provider = OllamaProvider(transport=httpx.MockTransport(handler))
    with pytest.raises(RemoteUnavailable):
        await provider.complete("system", "user")


def test_build_llm_provider_disabled(settings):
    assert build_llm_provider(settings) is None


@pytest.mark.parametrize("name", ["openai", "anthropic"])
def test_build_llm_provider_requires_key(settings, name):
    assert build_llm_provider(settings.model_copy(update={"llm_provider": name})) is None


def test_build_llm_provider_unknown_name(settings):
    assert build_llm_provider(settings.model_copy(update={"llm_provider": "mystery"})) is None


def test_build_llm_provider_ollama_uses_default_model(settings):
    configured = settings.model_copy(update={"llm_provider": "ollama", "llm_model": None})
    provider = build_llm_provider(configured)
    assert isinstance(provider, OllamaProvider)
    assert provider.model == "llama3.2"
    assert provider.base_url == configured.ollama_base_url.rstrip("/")


@pytest.mark.parametrize(
    "reply, expected",
    [
        ("plain answer", "plain answer"),
        ("<think>step one\nstep two</think>Answer.", "Answer."),
        ("<THINK>x</THINK>  Answer. ", "Answer."),
        ("<think>unterminated", ""),
        (None, ""),
    ],
)
def test_strip_reasoning(reply, expected):
    assert strip_reasoning(reply) == expected
