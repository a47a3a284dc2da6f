import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

MIB = 1024 * 1024


class AppEnv(Enum):
    """Deployment modes. Error details are only exposed outside production."""
    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class Config:
    """Configuration management for the quote parser."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Oracle (LLM) configuration
        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
        self.ORACLE_TIMEOUT_S = _env_float('ORACLE_TIMEOUT_S', 60.0)
        self.ORACLE_MAX_RETRIES = _env_int('ORACLE_MAX_RETRIES', 2)
        self.ORACLE_TEMPERATURE = _env_float('ORACLE_TEMPERATURE', 0.1)
        self.ORACLE_MAX_TOKENS = _env_int('ORACLE_MAX_TOKENS', 1500)

        # Linked content fetching
        self.LINK_FETCH_TIMEOUT_S = _env_float('LINK_FETCH_TIMEOUT_S', 15.0)
        self.MAX_LINKS = _env_int('MAX_LINKS', 5)
        self.MAX_LINK_BYTES = _env_int('MAX_LINK_BYTES', 2 * MIB)
        self.MIN_LINK_TEXT_CHARS = _env_int('MIN_LINK_TEXT_CHARS', 100)

        # Uploads and persistence
        self.MAX_UPLOAD_BYTES = _env_int('MAX_UPLOAD_BYTES', 10 * MIB)
        self.RAW_CONTENT_LIMIT = _env_int('RAW_CONTENT_LIMIT', 50000)
        self.DATABASE_URL = os.getenv('DATABASE_URL')

        self.APP_ENV = os.getenv('APP_ENV', AppEnv.PRODUCTION.value).strip().lower()

    @property
    def expose_error_details(self) -> bool:
        return self.APP_ENV != AppEnv.PRODUCTION.value

    @property
    def persistence_enabled(self) -> bool:
        return bool(self.DATABASE_URL)

    def validate(self) -> list[str]:
        """
        Validate that the required configuration is present.

        Returns:
            list[str]: Human-readable problems; empty when the configuration is usable
        """
        problems = []
        if not self.OPENAI_API_KEY:
            problems.append("OPENAI_API_KEY is not set. Please set it in the .env file.")
        if self.APP_ENV not in {e.value for e in AppEnv}:
            problems.append(
                f"Unknown APP_ENV '{self.APP_ENV}'. Must be one of: {', '.join(e.value for e in AppEnv)}"
            )
        if self.MAX_LINKS < 0:
            problems.append("MAX_LINKS must not be negative.")
        return problems

    def get_model_info(self) -> str:
        return f"OpenAI ({self.OPENAI_MODEL})"
