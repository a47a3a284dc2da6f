"""
QuoteExtractionOracle - prompt construction and response validation for the
LLM that reads hotel quotes.
"""

import json
import math
import re
from typing import Any

from api.base_client import BaseOracleClient
from models.errors import IncompleteOracleResponse, MalformedOracleResponse
from models.quote import CalculationBreakdown, CombinedText, ExtractionResult
from utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("guestroomTotal", "meetingRoomTotal", "foodBeverageTotal")

SYSTEM_PROMPT = (
    "You are a precise financial data extractor specializing in hotel quotes. "
    "You must calculate guestroom totals when not explicitly provided. "
    "Return only valid JSON with no additional text or formatting."
)

EXTRACTION_PROMPT_TEMPLATE = '''
You are a hotel quote financial data extractor. Parse this hotel quote content and extract the following values.

IMPORTANT: Return ONLY valid JSON with these exact keys:
{{
  "guestroomTotal": number | null,
  "meetingRoomTotal": number | null,
  "foodBeverageTotal": number | null,
  "confidence": number between 0 and 1,
  "aiNotes": "brief explanation of what was found or any issues",
  "calculationBreakdown": {{
    "roomRate": number | null,
    "roomsPerNight": number | null,
    "numberOfNights": number | null,
    "calculatedTotal": number | null
  }}
}}

EXTRACTION RULES:
- Extract only the final numerical values (remove $, commas, currency symbols)
- Use null if a category is not found or explicitly $0
- DO NOT extract a total quote - focus only on the individual components

COMPLIMENTARY vs MINIMUM HANDLING:
- If something is described as "complimentary", "free", "included", or "no charge" = extract as null (not a cost), never 0 and never omit the key
- F&B "minimums" are spending requirements, not additional costs - extract the minimum amount as foodBeverageTotal
- Meeting room costs that are "complimentary with F&B minimum" = extract meeting room as null (free)
- Don't double-count minimums as both meeting room cost AND F&B cost

GUESTROOM TOTAL CALCULATION:
1. FIRST: Look for an explicitly stated guestroom total dollar amount
2. IF NOT FOUND: Calculate using: Room Rate x Rooms per Night x Number of Nights
3. Look for these terms for room rate: "rate", "room rate", "nightly rate", "ROH rate", "group rate"
4. Look for these terms for room count: "rooms", "guestrooms", "room nights", "total rooms"
5. Calculate nights from check-in to check-out dates
6. In your calculationBreakdown, show: roomRate, roomsPerNight, numberOfNights, calculatedTotal
7. If you calculate the total, use that calculated amount as guestroomTotal

MEETING ROOM TOTAL:
- Look for meeting rooms, conference rooms, function space, event space RENTAL FEES
- IGNORE items labeled as "complimentary", "free", "included", or "no charge"
- IGNORE meeting space that is "complimentary with F&B minimum" - that means it's free

FOOD & BEVERAGE TOTAL:
- Look for F&B, food & beverage, catering, meals, breakfast, lunch, dinner COSTS
- Include F&B "minimums" as these represent required spending
- Look for phrases like "F&B minimum", "food & beverage minimum", "catering minimum"

EXAMPLES:
- "Complimentary meeting space with $50,000 F&B minimum" -> meetingRoomTotal: null, foodBeverageTotal: 50000
- "$5,000 meeting room rental + $30,000 F&B minimum" -> meetingRoomTotal: 5000, foodBeverageTotal: 30000
- "Free breakfast included" -> foodBeverageTotal: null (unless other F&B costs exist)

VALIDATION:
- If multiple line items exist in a category, sum them up
- Confidence should reflect how certain you are (1.0 = very certain, 0.5 = somewhat certain, 0.2 = low certainty)
- In aiNotes, explain your reasoning, especially for complimentary items and minimums

Content to parse:
"""
{content}
"""
'''

_CURRENCY_NOISE = re.compile(r"[\s,$€£¥]|USD", re.IGNORECASE)


def build_prompt(combined_text: CombinedText | str) -> tuple[str, str]:
    """
    Build the (system, user) messages for one extraction.

    The combined text is embedded verbatim. It is not truncated here; callers
    that need to respect the model's input budget must trim beforehand.
    """
    content = combined_text.text if isinstance(combined_text, CombinedText) else combined_text
    return SYSTEM_PROMPT, EXTRACTION_PROMPT_TEMPLATE.format(content=content)


def _as_number(value: Any) -> int | float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        cleaned = _CURRENCY_NOISE.sub("", value)
        try:
            value = float(cleaned)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        as_float = float(value)
    except OverflowError:
        return None
    if math.isnan(as_float) or math.isinf(as_float):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _as_confidence(value: Any) -> float:
    number = _as_number(value)
    if number is None:
        return 0.0
    return float(min(max(number, 0.0), 1.0))


def parse_oracle_response(raw: str | None) -> ExtractionResult:
    """
    Parse and validate the oracle's JSON reply.

    Raises:
        MalformedOracleResponse: The reply is not a JSON object
        IncompleteOracleResponse: One of the three category totals is absent
    """
    try:
        parsed = json.loads(raw or "")
    except (json.JSONDecodeError, TypeError) as exc:
        logger.error(
            "Oracle returned invalid JSON",
            extra={"extra_fields": {"error": str(exc), "raw_preview": (raw or "")[:500]}},
        )
        raise MalformedOracleResponse(details=raw) from exc

    if not isinstance(parsed, dict):
        raise MalformedOracleResponse(details=raw)

    missing = [name for name in REQUIRED_FIELDS if name not in parsed]
    if missing:
        logger.error(
            "Oracle response missing required fields",
            extra={"extra_fields": {"missing": missing, "keys": sorted(parsed.keys())}},
        )
        raise IncompleteOracleResponse(details={"missing": missing})

    breakdown = parsed.get("calculationBreakdown")
    if not isinstance(breakdown, dict):
        breakdown = {}

    notes = parsed.get("aiNotes")

    return ExtractionResult(
        guestroom_total=_as_number(parsed["guestroomTotal"]),
        meeting_room_total=_as_number(parsed["meetingRoomTotal"]),
        food_beverage_total=_as_number(parsed["foodBeverageTotal"]),
        confidence=_as_confidence(parsed.get("confidence")),
        ai_notes="" if notes is None else str(notes),
        calculation_breakdown=CalculationBreakdown(
            room_rate=_as_number(breakdown.get("roomRate")),
            rooms_per_night=_as_number(breakdown.get("roomsPerNight")),
            number_of_nights=_as_number(breakdown.get("numberOfNights")),
            calculated_total=_as_number(breakdown.get("calculatedTotal")),
        ),
    )


class QuoteExtractionOracle:
    """Wraps an oracle client with the hotel quote prompt and response contract."""

    def __init__(self, client: BaseOracleClient, temperature: float = 0.1, max_tokens: int = 1500):
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def extract(self, combined_text: CombinedText | str) -> ExtractionResult:
        system_prompt, user_prompt = build_prompt(combined_text)
        raw = self.client.complete_json(
            system_prompt,
            user_prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        result = parse_oracle_response(raw)

        logger.info(
            "Quote extraction parsed",
            extra={
                "extra_fields": {
                    "provider": self.client.provider_name,
                    "guestroom_total": result.guestroom_total,
                    "meeting_room_total": result.meeting_room_total,
                    "food_beverage_total": result.food_beverage_total,
                    "confidence": result.confidence,
                }
            },
        )
        return result
