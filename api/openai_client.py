import time
from typing import Any

import openai

from models.errors import OracleUnavailable
from utils.logger import get_logger

from .base_client import BaseOracleClient

logger = get_logger(__name__)


class OpenAIClient(BaseOracleClient):
    """
    Extraction oracle backed by the OpenAI chat completions API.

    Requests JSON-object output. Every SDK failure is normalized into
    ``OracleUnavailable`` carrying an error code in its details.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str | None,
        model_name: str = "gpt-4o-mini",
        timeout_s: float = 60.0,
        max_retries: int = 2,
        client: Any = None,
        **kwargs,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: The OpenAI API key
            model_name: The chat model to use (default: gpt-4o-mini)
            timeout_s: Upper bound for one completion request, retries excluded
            max_retries: SDK-level retries for connection errors and 429/5xx
            client: Pre-built SDK client (tests inject a fake)
        """
        super().__init__(api_key, model_name=model_name, **kwargs)
        self.model_name = model_name
        self.timeout_s = timeout_s
        self.client = client or openai.OpenAI(api_key=api_key, timeout=timeout_s, max_retries=max_retries)

    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.1,
        max_tokens: int = 1500,
    ) -> str:
        start_time = time.time()

        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            code, retryable = self._normalize_error(e)
            logger.error(
                f"OpenAI completion failed: {code}",
                extra={
                    "extra_fields": {
                        "model": self.model_name,
                        "error_code": code,
                        "error_message": str(e),
                        "retryable": retryable,
                        "latency_ms": latency_ms,
                    }
                },
            )
            raise OracleUnavailable(
                details={"code": code, "retryable": retryable, "message": str(e)}
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        text = response.choices[0].message.content if response.choices else None
        usage = self.get_token_usage(response) or {}

        logger.info(
            "OpenAI completion successful",
            extra={
                "extra_fields": {
                    "model": self.model_name,
                    "latency_ms": latency_ms,
                    "tokens": usage.get("total_tokens"),
                    "finish_reason": response.choices[0].finish_reason if response.choices else None,
                }
            },
        )
        return text or ""

    @staticmethod
    def _normalize_error(error: Exception) -> tuple[str, bool]:
        """Map SDK exceptions to (code, retryable)."""
        if isinstance(error, openai.APITimeoutError):
            return "timeout", True
        if isinstance(error, openai.AuthenticationError):
            return "auth", False
        if isinstance(error, openai.RateLimitError):
            return "rate_limit", True
        if isinstance(error, openai.BadRequestError):
            return "bad_request", False
        if isinstance(error, (openai.APIConnectionError, openai.InternalServerError)):
            return "provider_error", True
        if isinstance(error, openai.OpenAIError):
            return "provider_error", False
        return "unknown", False
