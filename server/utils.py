"""Shared utilities for FastAPI routes."""

from typing import Any

from models.errors import QuoteParserError


def build_error_payload(error: QuoteParserError, expose_details: bool) -> dict[str, Any]:
    """
    Build the JSON error body: ``{"error": ...}`` plus ``details`` outside production.
    """
    payload: dict[str, Any] = {"error": error.message}
    if expose_details and error.details is not None:
        payload["details"] = error.details
    return payload
