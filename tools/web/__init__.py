"""Linked content tools: URL harvesting and fetching."""

from .factory import create_link_fetcher_from_env
from .link_fetcher import LinkedContentFetcher
from .link_harvester import extract_links

__all__ = ["LinkedContentFetcher", "create_link_fetcher_from_env", "extract_links"]
