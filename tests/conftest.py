import io
import json

import pytest
from dotenv import load_dotenv

from api.base_client import BaseOracleClient
from models.quote import FileRef

# Load environment variables from .env file for tests
load_dotenv()


SAMPLE_QUOTE_EMAIL = """Hi Dana,

Thanks for considering the Harbor View Hotel for your sales kickoff.

Group rate: $189 per night
Rooms: 20 guestrooms per night
Check-in: March 3, 2025 / Check-out: March 6, 2025

Meeting space is complimentary with a $30,000 F&B minimum.
"""


class StubOracleClient(BaseOracleClient):
    """Offline oracle returning a canned JSON payload and recording prompts."""

    provider_name = "stub"

    def __init__(self, payload=None, raw: str | None = None, error: Exception | None = None):
        super().__init__(api_key="test-key", model_name="stub-model")
        self.payload = payload
        self.raw = raw
        self.error = error
        self.calls: list[dict] = []

    def complete_json(self, system_prompt, user_prompt, *, temperature=0.1, max_tokens=1500):
        self.calls.append(
            {
                "system": system_prompt,
                "user": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return self.raw
        return json.dumps(self.payload)


def oracle_payload(guestroom=30000, meeting=None, food=50000, **extra):
    payload = {
        "guestroomTotal": guestroom,
        "meetingRoomTotal": meeting,
        "foodBeverageTotal": food,
        "confidence": 0.9,
        "aiNotes": "Meeting room complimentary with F&B minimum",
        "calculationBreakdown": {
            "roomRate": 200,
            "roomsPerNight": 50,
            "numberOfNights": 3,
            "calculatedTotal": 30000,
        },
    }
    payload.update(extra)
    return payload


def make_file_ref(data: bytes, media_type: str, filename: str = "quote", size: int | None = None) -> FileRef:
    return FileRef(
        filename=filename,
        media_type=media_type,
        size=len(data) if size is None else size,
        stream=io.BytesIO(data),
    )


@pytest.fixture
def sample_email():
    return SAMPLE_QUOTE_EMAIL


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "OPENAI_API_KEY": "test-api-key",
        "OPENAI_MODEL": "gpt-4o-mini",
        "APP_ENV": "test",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return env_vars
