"""The generative-AI gateway consumed by the storyboard workflow."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol

from anthropic import APIError
from google.genai import errors as genai_errors

from .agents import (
    CharacterProfileAgent,
    EnrichInput,
    ProfileInput,
    ProjectMetadataAgent,
    PromptRefinerAgent,
    RefineInput,
    SceneEnrichmentAgent,
    SegmentInput,
    SegmenterAgent,
)
from .errors import GatewayError
from .models import CharacterProfile, ProjectMetadata, Scene
from .services import AnthropicClient, ImagenClient, SpeechClient

logger = logging.getLogger(__name__)


class AIGateway(Protocol):
    """Request/response calls the workflow depends on."""

    def segment(self, text: str, max_chars: int) -> List[str]:
        ...

    def profile(
        self,
        text: str,
        edit_request: str = "",
        prior: Optional[CharacterProfile] = None,
    ) -> CharacterProfile:
        ...

    def metadata(self, text: str) -> ProjectMetadata:
        ...

    def enrich(
        self,
        segment: str,
        display_id: int,
        profile: CharacterProfile,
        style: str,
    ) -> Scene:
        ...

    def refine_prompt(
        self,
        prompt: str,
        request: str,
        segment: str,
        profile: CharacterProfile,
    ) -> str:
        ...

    def render_preview(self, prompt: str) -> bytes:
        ...

    def synthesize_speech(self, text: str, voice_description: str) -> bytes:
        ...


@contextmanager
def _remote_call(what: str) -> Iterator[None]:
    """Report SDK failures as GatewayError."""
    try:
        yield
    except (APIError, genai_errors.APIError) as e:
        logger.error(f"{what} failed: {e}")
        raise GatewayError(f"{what} failed: {e}") from e


class StudioGateway:
    """AIGateway backed by Claude (text), Imagen (previews) and Gemini (speech).

    Clients are created on first use so a session that never renders
    previews does not need Google credentials.
    """

    def __init__(
        self,
        client: Optional[AnthropicClient] = None,
        imagen: Optional[ImagenClient] = None,
        speech: Optional[SpeechClient] = None,
        model: Optional[str] = None,
    ) -> None:
        self._client = client
        self._model = model
        self._imagen = imagen
        self._speech = speech
        self._agents: dict = {}

    def _agent(self, agent_cls):
        agent = self._agents.get(agent_cls)
        if agent is None:
            if self._client is None:
                self._client = AnthropicClient(model=self._model)
            agent = agent_cls(client=self._client, model=self._client.model)
            self._agents[agent_cls] = agent
        return agent

    def segment(self, text: str, max_chars: int) -> List[str]:
        with _remote_call("Script segmentation"):
            return self._agent(SegmenterAgent).run(SegmentInput(text=text, max_chars=max_chars))

    def profile(
        self,
        text: str,
        edit_request: str = "",
        prior: Optional[CharacterProfile] = None,
    ) -> CharacterProfile:
        with _remote_call("Character profile"):
            return self._agent(CharacterProfileAgent).run(
                ProfileInput(script=text, edit_request=edit_request, current=prior)
            )

    def metadata(self, text: str) -> ProjectMetadata:
        with _remote_call("Tone analysis"):
            return self._agent(ProjectMetadataAgent).run(text)

    def enrich(
        self,
        segment: str,
        display_id: int,
        profile: CharacterProfile,
        style: str,
    ) -> Scene:
        with _remote_call(f"Scene {display_id} enrichment"):
            return self._agent(SceneEnrichmentAgent).run(
                EnrichInput(segment=segment, scene_id=display_id, profile=profile, style=style)
            )

    def refine_prompt(
        self,
        prompt: str,
        request: str,
        segment: str,
        profile: CharacterProfile,
    ) -> str:
        with _remote_call("Prompt refinement"):
            return self._agent(PromptRefinerAgent).run(
                RefineInput(prompt=prompt, request=request, segment=segment, profile=profile)
            )

    def render_preview(self, prompt: str) -> bytes:
        if self._imagen is None:
            self._imagen = ImagenClient()
        result = self._imagen.render_preview(prompt)
        if not result.ok:
            raise GatewayError(f"Preview rendering failed: {result.error_message}")
        return result.image

    def synthesize_speech(self, text: str, voice_description: str) -> bytes:
        if self._speech is None:
            self._speech = SpeechClient()
        with _remote_call("Speech synthesis"):
            return self._speech.synthesize(text, voice_description)
