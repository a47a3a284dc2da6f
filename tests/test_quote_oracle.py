import json

import pytest

from conftest import StubOracleClient, oracle_payload
from models.errors import IncompleteOracleResponse, MalformedOracleResponse, OracleUnavailable
from models.quote import CombinedText
from orchestrator.quote_oracle import (
    SYSTEM_PROMPT,
    QuoteExtractionOracle,
    build_prompt,
    parse_oracle_response,
)

pytestmark = pytest.mark.unit


def test_build_prompt_embeds_content_verbatim():
    system, user = build_prompt(CombinedText(text="Group rate $189 {not a placeholder}"))
    assert system == SYSTEM_PROMPT
    assert 'Content to parse:\n"""\nGroup rate $189 {not a placeholder}\n"""' in user
    assert '"guestroomTotal": number | null' in user
    assert "complimentary" in user


def test_parse_full_response():
    result = parse_oracle_response(json.dumps(oracle_payload()))
    assert result.guestroom_total == 30000
    assert result.meeting_room_total is None
    assert result.food_beverage_total == 50000
    assert result.confidence == 0.9
    assert result.ai_notes.startswith("Meeting room complimentary")
    assert result.calculation_breakdown.room_rate == 200
    assert result.calculation_breakdown.calculated_total == 30000


def test_optional_fields_get_defaults():
    raw = json.dumps({"guestroomTotal": None, "meetingRoomTotal": 5000, "foodBeverageTotal": None})
    result = parse_oracle_response(raw)
    assert result.confidence == 0.0
    assert result.ai_notes == ""
    assert result.calculation_breakdown.to_dict() == {
        "roomRate": None,
        "roomsPerNight": None,
        "numberOfNights": None,
        "calculatedTotal": None,
    }


def test_numeric_strings_are_cleaned():
    raw = json.dumps(oracle_payload(guestroom="$11,340", food="30,000.50"))
    result = parse_oracle_response(raw)
    assert result.guestroom_total == 11340
    assert result.food_beverage_total == pytest.approx(30000.5)


def test_confidence_is_clamped():
    assert parse_oracle_response(json.dumps(oracle_payload(confidence=7))).confidence == 1.0
    assert parse_oracle_response(json.dumps(oracle_payload(confidence=-1))).confidence == 0.0


@pytest.mark.parametrize("raw", ["not json", "", "[1, 2, 3]", None])
def test_malformed_response(raw):
    with pytest.raises(MalformedOracleResponse) as exc_info:
        parse_oracle_response(raw)
    assert exc_info.value.message == "AI returned invalid JSON response"
    assert exc_info.value.status_code == 500


def test_missing_required_field():
    payload = oracle_payload()
    del payload["foodBeverageTotal"]
    with pytest.raises(IncompleteOracleResponse) as exc_info:
        parse_oracle_response(json.dumps(payload))
    assert exc_info.value.details == {"missing": ["foodBeverageTotal"]}


def test_explicit_null_is_not_missing():
    result = parse_oracle_response(json.dumps(oracle_payload(guestroom=None, food=None)))
    assert result.guestroom_total is None
    assert result.food_beverage_total is None


def test_extract_passes_sampling_settings():
    client = StubOracleClient(payload=oracle_payload())
    oracle = QuoteExtractionOracle(client, temperature=0.1, max_tokens=1500)

    result = oracle.extract(CombinedText(text="Group rate $200"))

    assert result.guestroom_total == 30000
    assert len(client.calls) == 1
    assert client.calls[0]["temperature"] == 0.1
    assert client.calls[0]["max_tokens"] == 1500
    assert "Group rate $200" in client.calls[0]["user"]


def test_extract_propagates_unavailable_oracle():
    oracle = QuoteExtractionOracle(StubOracleClient(error=OracleUnavailable(details={"code": "timeout"})))
    with pytest.raises(OracleUnavailable):
        oracle.extract("anything")


def test_out_of_range_numbers_become_null():
    raw = (
        '{"guestroomTotal": 1' + "0" * 400 + ', "meetingRoomTotal": 5000, '
        '"foodBeverageTotal": "1e400", "confidence": 1' + "0" * 400 + "}"
    )
    result = parse_oracle_response(raw)
    assert result.guestroom_total is None
    assert result.meeting_room_total == 5000
    assert result.food_beverage_total is None
    assert result.confidence == 0.0
