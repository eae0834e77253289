"""HTTP route handlers for summarization, trust checks and chat."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

import orjson
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from newsdigest.chat import converse
from newsdigest.config import Settings, get_settings
from newsdigest.summarizer.models import SourceKind, SummarizationRequest
from newsdigest.summarizer.service import summarize
from newsdigest.trust.classifier import classify_trust

from .schemas import (
    ChatRequestModel,
    ChatResponseModel,
    EngineLiteral,
    LinkSummaryRequestModel,
    SummarizeRequestModel,
    SummaryResponseModel,
    TextSummaryRequestModel,
    TrustRequestModel,
    TrustResponseModel,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail={"error": "payload_too_large", "limit_bytes": limit},
    )


async def _load_request_model(
    http_request: Request, model_cls: Type[BaseModel], settings: Settings
) -> BaseModel:
    header_length = http_request.headers.get("content-length")
    if header_length:
        try:
            content_length = int(header_length)
        except ValueError:
            content_length = None
        if content_length is not None and content_length > settings.max_payload_bytes:
            raise _too_large(settings.max_payload_bytes)

    body_bytes = await http_request.body()
    if body_bytes and len(body_bytes) > settings.max_payload_bytes:
        raise _too_large(settings.max_payload_bytes)

    if not body_bytes:
        data: Dict[str, Any] = {}
    else:
        try:
            data = orjson.loads(body_bytes)
        except orjson.JSONDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "invalid_json", "details": str(exc)},
            ) from exc

    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def _request_loader(model_cls: Type[BaseModel]):
    async def load(http_request: Request) -> BaseModel:
        return await _load_request_model(http_request, model_cls, get_settings())

    return load


async def _summarize(
    kind: SourceKind, payload: Any, engine: Optional[EngineLiteral]
) -> SummaryResponseModel:
    result = await summarize(
        SummarizationRequest(kind=kind, payload=payload, engine=engine),
        settings=get_settings(),
    )
    return SummaryResponseModel.from_domain(result)


@router.post("/v1/summarize", response_model=SummaryResponseModel)
async def summarize_any(
    summary_request: SummarizeRequestModel = Depends(_request_loader(SummarizeRequestModel)),
):
    return await _summarize(
        SourceKind(summary_request.kind), summary_request.payload, summary_request.engine
    )


@router.post("/v1/summarize/text", response_model=SummaryResponseModel)
async def summarize_text(
    text_request: TextSummaryRequestModel = Depends(_request_loader(TextSummaryRequestModel)),
):
    return await _summarize(SourceKind.TEXT, text_request.text, text_request.engine)


@router.post("/v1/summarize/url", response_model=SummaryResponseModel)
async def summarize_url(
    link_request: LinkSummaryRequestModel = Depends(_request_loader(LinkSummaryRequestModel)),
):
    return await _summarize(SourceKind.WEB, link_request.url, link_request.engine)


@router.post("/v1/summarize/video", response_model=SummaryResponseModel)
async def summarize_video(
    link_request: LinkSummaryRequestModel = Depends(_request_loader(LinkSummaryRequestModel)),
):
    return await _summarize(SourceKind.VIDEO, link_request.url, link_request.engine)


@router.post("/v1/summarize/document", response_model=SummaryResponseModel)
async def summarize_document(
    file: UploadFile = File(...),
    engine: Optional[EngineLiteral] = Form(default=None),
):
    settings = get_settings()
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise _too_large(settings.max_upload_bytes)
    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise _too_large(settings.max_upload_bytes)
    return await _summarize(SourceKind.DOCUMENT, contents, engine)


@router.post("/v1/trust", response_model=TrustResponseModel)
async def trust_check(
    trust_request: TrustRequestModel = Depends(_request_loader(TrustRequestModel)),
):
    verdict = await classify_trust(trust_request.text, settings=get_settings())
    return TrustResponseModel(**verdict.model_dump())


@router.post("/v1/chat", response_model=ChatResponseModel)
async def chat(
    chat_request: ChatRequestModel = Depends(_request_loader(ChatRequestModel)),
):
    reply = await converse(
        chat_request.message, chat_request.context, settings=get_settings()
    )
    return ChatResponseModel(response=reply)
