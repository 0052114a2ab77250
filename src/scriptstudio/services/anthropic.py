"""Anthropic Claude API client wrapper."""

import logging
import time
from typing import Optional

from anthropic import Anthropic, APIError, APIConnectionError, RateLimitError

from ..config import config
from ..errors import GatewayError

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client wrapper for the Claude messages API.

    Requests are attempted once by default; a failed call is reported to the
    user instead of being repeated behind their back. ``max_retries`` can be
    raised for unattended runs.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 1,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.default_model.
            max_retries: Attempts per request for rate-limit and connection errors.
            retry_delay: Base delay between attempts in seconds (exponential backoff).
        """
        self._api_key = api_key or config.anthropic_api_key
        if not self._api_key:
            raise ValueError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var."
            )

        self._client = Anthropic(api_key=self._api_key)
        self._model = model or config.default_model
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Send one user prompt and return the reply text.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            system: Optional system prompt.
            temperature: Sampling temperature (0.0-1.0).

        Returns:
            The concatenated text blocks of Claude's response.

        Raises:
            APIError: If the API request fails.
            GatewayError: If the reply was cut off at ``max_tokens``.
        """
        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        for attempt in range(self._max_retries):
            last_attempt = attempt == self._max_retries - 1
            try:
                logger.debug(
                    f"Sending request to Claude (attempt {attempt + 1}/{self._max_retries})"
                )
                response = self._client.messages.create(**kwargs)

            except (RateLimitError, APIConnectionError) as e:
                if last_attempt:
                    raise
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"{type(e).__name__}: {e}. Retrying in {delay:.1f}s...")
                time.sleep(delay)
                continue

            except APIError as e:
                logger.error(f"API error: {e}")
                raise

            if response.stop_reason == "max_tokens":
                raise GatewayError(
                    f"Claude reply was truncated at {max_tokens} tokens"
                )

            return "".join(
                block.text for block in response.content if hasattr(block, "text")
            )

        raise GatewayError("Claude request was not attempted")
