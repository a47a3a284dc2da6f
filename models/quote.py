import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, BinaryIO

Number = int | float


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class FileRef:
    """An uploaded file as declared by the client. ``stream`` is read lazily."""

    filename: str
    media_type: str
    size: int
    stream: BinaryIO


@dataclass(frozen=True)
class InputDocument:
    source_text: str = ""
    uploaded_file: FileRef | None = None


@dataclass(frozen=True)
class LinkFetchResult:
    url: str
    text: str = ""
    succeeded: bool = False
    error_message: str | None = None

    def to_error_dict(self) -> dict[str, str]:
        return {"url": self.url, "message": self.error_message or "no content"}


@dataclass(frozen=True)
class CombinedText:
    """Merged document text plus the provenance markers inserted into it, in order."""

    text: str
    markers: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class CalculationBreakdown:
    room_rate: Number | None = None
    rooms_per_night: Number | None = None
    number_of_nights: Number | None = None
    calculated_total: Number | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "roomRate": self.room_rate,
            "roomsPerNight": self.rooms_per_night,
            "numberOfNights": self.number_of_nights,
            "calculatedTotal": self.calculated_total,
        }


@dataclass(frozen=True)
class ExtractionResult:
    guestroom_total: Number | None
    meeting_room_total: Number | None
    food_beverage_total: Number | None
    confidence: float = 0.0
    ai_notes: str = ""
    calculation_breakdown: CalculationBreakdown = field(default_factory=CalculationBreakdown)


@dataclass(frozen=True)
class ProcessedQuote:
    """Extraction result enriched with the derived total and request metadata."""

    result: ExtractionResult
    total_quote: Number | None
    combined_text: CombinedText
    has_linked_content: bool = False
    linked_content_fetched: int = 0
    linked_content_errors: list[dict[str, str]] = field(default_factory=list)
    processed_at: str = field(default_factory=utc_now_iso)

    @property
    def content_length(self) -> int:
        return len(self.combined_text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "guestroomTotal": self.result.guestroom_total,
            "meetingRoomTotal": self.result.meeting_room_total,
            "foodBeverageTotal": self.result.food_beverage_total,
            "totalQuote": self.total_quote,
            "confidence": self.result.confidence,
            "aiNotes": self.result.ai_notes,
            "calculationBreakdown": self.result.calculation_breakdown.to_dict(),
            "processedAt": self.processed_at,
            "hasLinkedContent": self.has_linked_content,
            "linkedContentFetched": self.linked_content_fetched,
            "linkedContentErrors": list(self.linked_content_errors),
            "contentLength": self.content_length,
        }


@dataclass(frozen=True)
class QuoteRecord:
    """Row written to the ``quotes`` table. Write-once."""

    raw_content: str
    total_quote: Number | None
    guestroom_total: Number | None
    meeting_room_total: Number | None
    food_beverage_total: Number | None
    confidence: float
    ai_notes: str
    has_linked_content: bool
    linked_content_fetched: int
    linked_content_errors: str
    content_length: int
    processed_at: str
    calculation_breakdown: str

    @classmethod
    def from_processed(cls, quote: ProcessedQuote, raw_content_limit: int = 50000) -> "QuoteRecord":
        result = quote.result
        return cls(
            raw_content=quote.combined_text.text[:raw_content_limit],
            total_quote=quote.total_quote,
            guestroom_total=result.guestroom_total,
            meeting_room_total=result.meeting_room_total,
            food_beverage_total=result.food_beverage_total,
            confidence=result.confidence,
            ai_notes=result.ai_notes,
            has_linked_content=quote.has_linked_content,
            linked_content_fetched=quote.linked_content_fetched,
            linked_content_errors=json.dumps(quote.linked_content_errors),
            content_length=quote.content_length,
            processed_at=quote.processed_at,
            calculation_breakdown=json.dumps(result.calculation_breakdown.to_dict()),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "raw_content": self.raw_content,
            "total_quote": self.total_quote,
            "guestroom_total": self.guestroom_total,
            "meeting_room_total": self.meeting_room_total,
            "food_beverage_total": self.food_beverage_total,
            "confidence": self.confidence,
            "ai_notes": self.ai_notes,
            "has_linked_content": self.has_linked_content,
            "linked_content_fetched": self.linked_content_fetched,
            "linked_content_errors": self.linked_content_errors,
            "content_length": self.content_length,
            "processed_at": self.processed_at,
            "calculation_breakdown": self.calculation_breakdown,
        }
