"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = int | float


class CamelModel(BaseModel):
    """Serializes snake_case fields with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CalculationBreakdownDTO(CamelModel):
    room_rate: Number | None = None
    rooms_per_night: Number | None = None
    number_of_nights: Number | None = None
    calculated_total: Number | None = None


class LinkErrorDTO(BaseModel):
    url: str
    message: str


class QuoteResponseDTO(CamelModel):
    guestroom_total: Number | None = None
    meeting_room_total: Number | None = None
    food_beverage_total: Number | None = None
    total_quote: Number | None = None
    confidence: float = 0.0
    ai_notes: str = ""
    calculation_breakdown: CalculationBreakdownDTO = Field(default_factory=CalculationBreakdownDTO)
    processed_at: str
    has_linked_content: bool = False
    linked_content_fetched: int = 0
    linked_content_errors: list[LinkErrorDTO] = Field(default_factory=list)
    content_length: int = 0

    @classmethod
    def from_processed_quote(cls, quote):
        """Convert ProcessedQuote to DTO."""
        result = quote.result
        breakdown = result.calculation_breakdown
        return cls(
            guestroom_total=result.guestroom_total,
            meeting_room_total=result.meeting_room_total,
            food_beverage_total=result.food_beverage_total,
            total_quote=quote.total_quote,
            confidence=result.confidence,
            ai_notes=result.ai_notes,
            calculation_breakdown=CalculationBreakdownDTO(
                room_rate=breakdown.room_rate,
                rooms_per_night=breakdown.rooms_per_night,
                number_of_nights=breakdown.number_of_nights,
                calculated_total=breakdown.calculated_total,
            ),
            processed_at=quote.processed_at,
            has_linked_content=quote.has_linked_content,
            linked_content_fetched=quote.linked_content_fetched,
            linked_content_errors=[LinkErrorDTO(**e) for e in quote.linked_content_errors],
            content_length=quote.content_length,
        )


class QuoteSummaryDTO(CamelModel):
    id: int
    total_quote: Number | None = None
    guestroom_total: Number | None = None
    meeting_room_total: Number | None = None
    food_beverage_total: Number | None = None
    confidence: float | None = None
    ai_notes: str | None = None
    has_linked_content: bool = False
    linked_content_fetched: int = 0
    linked_content_errors: list[LinkErrorDTO] = Field(default_factory=list)
    content_length: int = 0
    processed_at: str
    calculation_breakdown: CalculationBreakdownDTO | None = None


class ErrorResponseDTO(BaseModel):
    error: str
    details: Any = None


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str
    oracle_configured: bool = False
    persistence_enabled: bool = False
