"""Error taxonomy for the quote parsing pipeline.

Every error carries the HTTP status it maps to and a public, human-readable
message. ``details`` holds diagnostics that are only exposed outside production.
"""

from typing import Any


class QuoteParserError(Exception):
    status_code: int = 500
    default_message: str = "Failed to parse quote"

    def __init__(self, message: str | None = None, *, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class UnsupportedMediaType(QuoteParserError):
    status_code = 400
    default_message = "File type not supported. Please upload PDF, HTML, or text files."


class PayloadTooLarge(QuoteParserError):
    status_code = 400
    default_message = "File too large. Please upload files smaller than 10MB."


class ExtractionFailed(QuoteParserError):
    status_code = 500
    default_message = "Could not extract text from the uploaded file"


class NoContentProvided(QuoteParserError):
    status_code = 400
    default_message = "No content provided. Please paste email text or upload a file."


class LinkFetchFailed(QuoteParserError):
    """Per-link failure. Always absorbed into a LinkFetchResult."""

    default_message = "Failed to fetch linked content"


class MalformedOracleResponse(QuoteParserError):
    default_message = "AI returned invalid JSON response"


class IncompleteOracleResponse(QuoteParserError):
    default_message = "AI response missing required fields"


class OracleUnavailable(QuoteParserError):
    default_message = "AI service temporarily unavailable"


class PersistenceFailed(QuoteParserError):
    """Raised by the quote sink; logged and swallowed by the orchestrator."""

    default_message = "Failed to persist quote record"


class InternalError(QuoteParserError):
    default_message = "Failed to parse quote"
