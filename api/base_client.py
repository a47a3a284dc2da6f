from abc import ABC, abstractmethod
from typing import Any


class BaseOracleClient(ABC):
    """
    Abstract base class for extraction oracles.

    An oracle takes a system and a user message and returns the raw text of a
    JSON object. Implementations raise ``OracleUnavailable`` when the service
    cannot be reached; they never parse or validate the returned JSON.
    """

    provider_name: str = "unknown"

    def __init__(self, api_key: str | None = None, **kwargs):
        """
        Initialize the oracle client.

        Args:
            api_key: API key for the oracle service
            **kwargs: Additional provider-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get("model_name")

    @abstractmethod
    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.1,
        max_tokens: int = 1500,
    ) -> str:
        """
        Ask the oracle for a JSON object.

        Args:
            system_prompt: Instructions for the oracle's role
            user_prompt: The task, including the document to extract from
            temperature: Sampling temperature; keep low for near-deterministic output
            max_tokens: Upper bound on generated tokens

        Returns:
            The raw response text, expected to be a JSON object
        """

    def get_token_usage(self, response: Any) -> dict[str, int] | None:
        """
        Extract token usage from a raw provider response, when the provider reports it.
        """
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return {
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
            "total_tokens": getattr(usage, "total_tokens", 0) or 0,
        }
