# newsdigest/api/schemas.py
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from newsdigest.summarizer.models import SourceKind

EngineLiteral = Literal["extractive", "remote"]
StringKindLiteral = Literal["text", "web", "video"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        protected_namespaces=(), populate_by_name=True, extra="forbid"
    )


class TextSummaryRequestModel(_RequestModel):
    text: str = Field(description="Raw text to summarize.")
    engine: Optional[EngineLiteral] = None


class LinkSummaryRequestModel(_RequestModel):
    # the web client sometimes sends both keys
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # accept BOTH "url" and "input" on input
    url: str = Field(
        validation_alias=AliasChoices("url", "input"),
        description="Page address or video link.",
    )
    engine: Optional[EngineLiteral] = None

    @field_validator("url", mode="before")
    @classmethod
    def coerce_url(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


class SummarizeRequestModel(_RequestModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: StringKindLiteral
    payload: str = Field(validation_alias=AliasChoices("input", "payload", "text", "url"))
    engine: Optional[EngineLiteral] = None


class SummaryResponseModel(BaseModel):
    summary: str
    ok: bool
    kind: SourceKind
    engine: Optional[str] = None
    fallback_used: bool = False
    error: Optional[str] = None

    @classmethod
    def from_domain(cls, result) -> "SummaryResponseModel":
        return cls(
            summary=result.summary,
            ok=result.ok,
            kind=result.kind,
            engine=result.engine,
            fallback_used=result.fallback_used,
            error=result.error,
        )


class TrustRequestModel(_RequestModel):
    text: str


class TrustResponseModel(BaseModel):
    is_trusted: bool
    confidence: Optional[float] = None
    reasoning: str
    method: str
    source: Optional[str] = None


class ChatRequestModel(_RequestModel):
    message: str = Field(min_length=1)
    context: Optional[str] = None

    @field_validator("message")
    @classmethod
    def ensure_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message is required.")
        return value


class ChatResponseModel(BaseModel):
    response: str
