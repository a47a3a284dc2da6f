"""Factory for creating the linked content fetcher from configuration."""

from config.config import Config
from utils.logger import get_logger

from .link_fetcher import LinkedContentFetcher

logger = get_logger(__name__)


def create_link_fetcher_from_env(config: Config | None = None) -> LinkedContentFetcher:
    """
    Create a LinkedContentFetcher from environment configuration.

    Environment variables:
        LINK_FETCH_TIMEOUT_S: Per-link hard timeout in seconds (default: 15)
        MAX_LINKS: Number of harvested links to fetch (default: 5)
        MAX_LINK_BYTES: Largest accepted response body (default: 2 MiB)
        MIN_LINK_TEXT_CHARS: Minimum cleaned text length (default: 100)
    """
    config = config or Config()

    logger.info(
        "Link fetcher configured",
        extra={
            "extra_fields": {
                "timeout_s": config.LINK_FETCH_TIMEOUT_S,
                "max_links": config.MAX_LINKS,
                "max_bytes": config.MAX_LINK_BYTES,
            }
        },
    )

    return LinkedContentFetcher(
        timeout_s=config.LINK_FETCH_TIMEOUT_S,
        max_links=config.MAX_LINKS,
        max_bytes=config.MAX_LINK_BYTES,
        min_text_chars=config.MIN_LINK_TEXT_CHARS,
    )
