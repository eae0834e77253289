import pytest
from httpx import ASGITransport, AsyncClient

from newsdigest import __version__
from newsdigest.chat import UNAVAILABLE_REPLY
from newsdigest.config import get_settings
from newsdigest.main import create_application


@pytest.fixture(scope="module")
def test_app():
    return create_application()


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.anyio
async def test_healthz_endpoint(test_app):
    async with _client(test_app) as client:
        response = await client.get("/healthz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"] == __version__
    assert body["engine"] == get_settings().summarizer_engine
    assert body["max_upload_bytes"] == get_settings().max_upload_bytes


@pytest.mark.anyio
async def test_text_summary(test_app):
    payload = {
        "text": "One. Two. Three. Four. Five. Six.",
        "engine": "extractive",
    }
    async with _client(test_app) as client:
        response = await client.post("/v1/summarize/text", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body == {
        "summary": "One. Three. Five. Six.",
        "ok": True,
        "kind": "text",
        "engine": "extractive",
        "fallback_used": False,
        "error": None,
    }


@pytest.mark.anyio
async def test_generic_summarize_endpoint_accepts_input_alias(test_app):
    payload = {"kind": "text", "input": "Just one sentence.", "engine": "extractive"}
    async with _client(test_app) as client:
        response = await client.post("/v1/summarize", json=payload)
    assert response.status_code == 200
    assert response.json()["summary"] == "Just one sentence."


@pytest.mark.anyio
async def test_empty_text_is_a_message_not_an_error(test_app):
    async with _client(test_app) as client:
        response = await client.post("/v1/summarize/text", json={"text": "   "})
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["error"] == "empty_content"
    assert body["summary"] == "No readable text was found to summarize."


@pytest.mark.anyio
@pytest.mark.parametrize(
    "route, payload",
    [
        ("/v1/summarize/url", {"url": "not a url"}),
        ("/v1/summarize/url", {"input": "ftp://files.example.com/report"}),
        ("/v1/summarize/video", {"url": "https://example.com/clip"}),
    ],
)
async def test_bad_references_are_reported(test_app, route, payload):
    async with _client(test_app) as client:
        response = await client.post(route, json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["error"] == "invalid_reference"
    assert body["summary"] == "The link or video reference could not be understood."


@pytest.mark.anyio
async def test_unreadable_document_upload(test_app):
    files = {"file": ("report.pdf", b"this is not a pdf", "application/pdf")}
    async with _client(test_app) as client:
        response = await client.post("/v1/summarize/document", files=files)
    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "document"
    assert body["error"] == "unreadable_document"
    assert body["summary"] == "The document could not be read. Please upload a valid PDF."


@pytest.mark.anyio
async def test_document_upload_too_large(test_app):
    settings = get_settings()
    original_limit = settings.max_upload_bytes
    settings.max_upload_bytes = 10
    try:
        files = {"file": ("report.pdf", b"%PDF-" + b"x" * 64, "application/pdf")}
        async with _client(test_app) as client:
            response = await client.post("/v1/summarize/document", files=files)
        assert response.status_code == 413
        body = response.json()
        assert body["error"] == "payload_too_large"
        assert body["limit_bytes"] == 10
    finally:
        settings.max_upload_bytes = original_limit


@pytest.mark.anyio
async def test_payload_too_large_error_structured(test_app):
    settings = get_settings()
    original_limit = settings.max_payload_bytes
    settings.max_payload_bytes = 10
    try:
        async with _client(test_app) as client:
            response = await client.post("/v1/summarize/text", json={"text": "x" * 64})
        assert response.status_code == 413
        assert response.json() == {"error": "payload_too_large", "limit_bytes": 10}
    finally:
        settings.max_payload_bytes = original_limit


@pytest.mark.anyio
async def test_invalid_json_body(test_app):
    async with _client(test_app) as client:
        response = await client.post(
            "/v1/summarize/text",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_json"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "route, payload",
    [
        ("/v1/summarize/text", {}),
        ("/v1/summarize/text", {"text": "Hello.", "unexpected": True}),
        ("/v1/summarize/text", {"text": "Hello.", "engine": "gpt"}),
        ("/v1/summarize", {"kind": "podcast", "input": "x"}),
        ("/v1/chat", {"message": "   "}),
    ],
)
async def test_validation_errors(test_app, route, payload):
    async with _client(test_app) as client:
        response = await client.post(route, json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert body["details"]


@pytest.mark.anyio
async def test_trust_endpoint_uses_allowlist(test_app):
    async with _client(test_app) as client:
        response = await client.post(
            "/v1/trust", json={"text": "According to the BBC, talks resume on Friday."}
        )
    assert response.status_code == 200
    body = response.json()
    assert body["is_trusted"] is True
    assert body["method"] == "allowlist"
    assert body["source"] == "bbc"
    assert body["confidence"] == 0.95


@pytest.mark.anyio
async def test_chat_without_provider_returns_unavailable_reply(test_app):
    settings = get_settings()
    original_provider = settings.llm_provider
    settings.llm_provider = "none"
    try:
        async with _client(test_app) as client:
            response = await client.post(
                "/v1/chat", json={"message": "What happened?", "context": "Floods."}
            )
        assert response.status_code == 200
        assert response.json() == {"response": UNAVAILABLE_REPLY}
    finally:
        settings.llm_provider = original_provider
