"""Trust verdict models and the validated decode of remote classifier replies."""

from __future__ import annotations

import re
from typing import Any, FrozenSet, Literal, Optional

import orjson
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

TrustMethod = Literal["allowlist", "heuristic", "remote", "unavailable"]

_CODE_FENCE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*|\s*```\s*$")


class TrustVerdict(BaseModel):
    is_trusted: bool
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    reasoning: str
    method: TrustMethod
    source: Optional[str] = None


class TrustLexicon(BaseModel):
    """Trusted publisher names and sensational tokens, lowercased and frozen."""

    model_config = ConfigDict(frozen=True)

    trusted_sources: FrozenSet[str]
    sensational_tokens: FrozenSet[str] = frozenset()

    @field_validator("trusted_sources", "sensational_tokens", mode="before")
    @classmethod
    def normalize_entries(cls, value: Any) -> FrozenSet[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return frozenset(
            " ".join(str(item).lower().split()) for item in value if str(item).strip()
        )


class RemoteVerdictPayload(BaseModel):
    """Shape a remote classifier is asked to return; every field is optional."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    is_trusted: bool = Field(
        default=False, validation_alias=AliasChoices("is_trusted", "isTrusted", "isReal")
    )
    confidence: float = 0.5
    reasoning: str = ""

    @field_validator("is_trusted", mode="before")
    @classmethod
    def coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"true", "yes", "1", "real", "trusted"}
        if value is None:
            return False
        return bool(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.5
        if number != number:  # NaN
            return 0.5
        return min(1.0, max(0.0, number))

    @field_validator("reasoning", mode="before")
    @classmethod
    def coerce_reasoning(cls, value: Any) -> str:
        if value is None:
            return ""
        return " ".join(str(value).split())


class VerdictDecodeError(ValueError):
    """The remote classifier reply could not be turned into a verdict."""


def strip_code_fences(raw: str) -> str:
    return _CODE_FENCE.sub("", raw.strip())


def parse_verdict(raw: str, max_reasoning_chars: int) -> TrustVerdict:
    """Decode a remote classifier reply into a verdict or raise ``VerdictDecodeError``."""
    if not raw or not raw.strip():
        raise VerdictDecodeError("empty reply")
    body = strip_code_fences(raw)
    if "{" in body and not (body.startswith("{") and body.endswith("}")):
        # Prose around the object, e.g. "Here is my verdict: {...}"
        body = body[body.find("{") : body.rfind("}") + 1]
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise VerdictDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise VerdictDecodeError("reply is not a JSON object")

    try:
        payload = RemoteVerdictPayload.model_validate(data)
    except ValidationError as exc:
        raise VerdictDecodeError(str(exc)) from exc

    reasoning = cap_reasoning(payload.reasoning, max_reasoning_chars) or (
        "Assessed by the remote classifier."
    )
    return TrustVerdict(
        is_trusted=payload.is_trusted,
        confidence=payload.confidence,
        reasoning=reasoning,
        method="remote",
    )


def cap_reasoning(reasoning: str, max_chars: int) -> str:
    if len(reasoning) <= max_chars:
        return reasoning
    return reasoning[: max_chars - 3].rstrip() + "..."


__all__ = [
    "RemoteVerdictPayload",
    "TrustLexicon",
    "TrustMethod",
    "TrustVerdict",
    "VerdictDecodeError",
    "cap_reasoning",
    "parse_verdict",
    "strip_code_fences",
]
