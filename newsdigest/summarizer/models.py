from __future__ import annotations

"""Domain models shared across extractors and summarization engines."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union


EngineOption = Literal["extractive", "remote"]
RawInput = Union[str, bytes]


class SourceKind(str, Enum):
    TEXT = "text"
    WEB = "web"
    DOCUMENT = "document"
    VIDEO = "video"


@dataclass(slots=True)
class SummarizationRequest:
    kind: SourceKind
    payload: RawInput
    engine: Optional[EngineOption] = None


@dataclass(slots=True)
class EngineResult:
    text: str
    engine: EngineOption
    calls: int = 0
    passes: int = 0


@dataclass(slots=True)
class SummaryResult:
    summary: str
    ok: bool
    kind: SourceKind
    engine: Optional[EngineOption] = None
    error: Optional[str] = None
    fallback_used: bool = False
    calls: int = 0
    passes: int = 0
    word_count: int = 0
