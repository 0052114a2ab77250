"""Base agent abstraction."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..services.anthropic import AnthropicClient
from ..config import config
from ..errors import GatewayError

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")
ModelT = TypeVar("ModelT", bound=BaseModel)

JSON_ONLY = (
    "Output valid JSON only, with no additional text or markdown formatting."
)


def extract_json(response: str) -> str:
    """Extract JSON from a response that may contain markdown or other text."""
    # Try to find JSON in code blocks
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    if "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    # Raw JSON: whichever bracket opens first wins
    candidates = [
        (response.find(open_char), open_char, close_char)
        for open_char, close_char in (("{", "}"), ("[", "]"))
    ]
    candidates = sorted(c for c in candidates if c[0] != -1)
    for start, start_char, end_char in candidates:
        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(response[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == start_char:
                depth += 1
            elif char == end_char:
                depth -= 1
                if depth == 0:
                    return response[start:i + 1]

    # Return as-is if no JSON structure found
    return response.strip()


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for AI agents.

    Provides shared functionality for agents that use Claude for generation.
    Subclasses must implement the `run` method and define their prompts.
    """

    def __init__(
        self,
        client: Optional[AnthropicClient] = None,
        model: Optional[str] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            client: AnthropicClient instance. Created if not provided.
            model: Model to use. Defaults to config.default_model.
        """
        self._model = model or config.default_model
        self._client = client or AnthropicClient(model=self._model)
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """Return the system prompt for this agent."""
        ...

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    @abstractmethod
    def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Args:
            input_data: Input data for the agent.

        Returns:
            Structured output from the agent.
        """
        ...

    def _create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """Create a message using the agent's client and system prompt.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.

        Returns:
            The text content of Claude's response.
        """
        self._logger.debug(f"Creating message with prompt length: {len(prompt)}")

        try:
            response = self._client.create_message(
                prompt=prompt,
                max_tokens=max_tokens,
                system=self.system_prompt,
                temperature=temperature,
            )
            self._logger.debug(f"Received response of length: {len(response)}")
            return response

        except Exception as e:
            self._logger.error(f"Error creating message: {e}")
            raise

    def _create_json(
        self,
        prompt: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> Any:
        """Ask for a JSON reply and decode it.

        Raises:
            GatewayError: If the reply does not contain valid JSON.
        """
        response = self._create_message(prompt, max_tokens=max_tokens, temperature=temperature)
        json_str = extract_json(response)

        try:
            return json.loads(json_str)
        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse JSON: {e}")
            self._logger.debug(f"Raw response: {response}")
            raise GatewayError(f"Invalid JSON in response: {e}") from e

    def _validate(self, model_cls: Type[ModelT], data: Any) -> ModelT:
        """Validate decoded JSON against a response schema.

        Raises:
            GatewayError: If a required field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise GatewayError(
                f"{self.name}: expected a JSON object, got {type(data).__name__}"
            )
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            self._logger.error(f"Response failed validation: {e}")
            raise GatewayError(f"{self.name}: malformed response: {e}") from e
