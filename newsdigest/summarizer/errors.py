"""Typed failures raised by extractors, summary backends and remote providers."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for failures turning raw input into normalized text."""

    code = "extraction_failed"
    user_message = "The content could not be processed."


class InvalidReference(ExtractionError):
    code = "invalid_reference"
    user_message = "The link or video reference could not be understood."


class FetchFailed(ExtractionError):
    code = "fetch_failed"
    user_message = "The page could not be fetched. Please check the link and try again."


class UnreadableDocument(ExtractionError):
    code = "unreadable_document"
    user_message = "The document could not be read. Please upload a valid PDF."


class EmptyContent(ExtractionError):
    code = "empty_content"
    user_message = "No readable text was found to summarize."


class LookupFailed(ExtractionError):
    code = "lookup_failed"
    user_message = "Video details could not be retrieved."


class SummarizationError(Exception):
    """Base class for summarization strategy failures."""


class BackendUnavailable(SummarizationError):
    """The remote summarizer rejected us or could not be reached."""

    code = "backend_unavailable"
    user_message = "The summarization service is unavailable right now."


class ChunkSummaryFailed(SummarizationError):
    """A single summarization call produced no usable text."""


class RemoteUnavailable(Exception):
    """A chat or classification call failed at the transport level."""
