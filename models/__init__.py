"""
Models package for quote extraction records and errors.
"""

from .quote import (
    CalculationBreakdown,
    CombinedText,
    ExtractionResult,
    FileRef,
    InputDocument,
    LinkFetchResult,
    ProcessedQuote,
    QuoteRecord,
)

__all__ = [
    "CalculationBreakdown",
    "CombinedText",
    "ExtractionResult",
    "FileRef",
    "InputDocument",
    "LinkFetchResult",
    "ProcessedQuote",
    "QuoteRecord",
]
