"""Factory for assembling the QuoteOrchestrator from configuration."""

from api.openai_client import OpenAIClient
from config.config import Config
from models.errors import OracleUnavailable
from orchestrator.core import QuoteOrchestrator
from orchestrator.quote_oracle import QuoteExtractionOracle
from tools.documents.text_extractor import TextExtractor
from tools.web.factory import create_link_fetcher_from_env
from utils.logger import get_logger

logger = get_logger(__name__)


def create_orchestrator_from_env(config: Config | None = None) -> QuoteOrchestrator:
    """
    Build a QuoteOrchestrator wired to OpenAI, the link fetcher and (optionally) the database.

    Raises:
        OracleUnavailable: OPENAI_API_KEY is not configured
    """
    config = config or Config()

    if not config.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY is not set; quote extraction is unavailable")
        raise OracleUnavailable(details="OPENAI_API_KEY is not configured")

    client = OpenAIClient(
        api_key=config.OPENAI_API_KEY,
        model_name=config.OPENAI_MODEL,
        timeout_s=config.ORACLE_TIMEOUT_S,
        max_retries=config.ORACLE_MAX_RETRIES,
    )
    oracle = QuoteExtractionOracle(
        client,
        temperature=config.ORACLE_TEMPERATURE,
        max_tokens=config.ORACLE_MAX_TOKENS,
    )

    record_sink = None
    if config.persistence_enabled:
        from db.repository import save_quote_record

        record_sink = save_quote_record

    logger.info(
        "Quote orchestrator configured",
        extra={
            "extra_fields": {
                "model": config.OPENAI_MODEL,
                "persistence_enabled": record_sink is not None,
                "max_upload_bytes": config.MAX_UPLOAD_BYTES,
            }
        },
    )

    return QuoteOrchestrator(
        oracle=oracle,
        text_extractor=TextExtractor(max_bytes=config.MAX_UPLOAD_BYTES),
        link_fetcher=create_link_fetcher_from_env(config),
        record_sink=record_sink,
        raw_content_limit=config.RAW_CONTENT_LIMIT,
    )
