"""Scene prompt refinement agent."""

from dataclasses import dataclass

from ..models import CharacterProfile
from .base import BaseAgent


@dataclass
class RefineInput:
    """Input data for prompt refinement."""

    prompt: str
    request: str
    segment: str
    profile: CharacterProfile


class PromptRefinerAgent(BaseAgent[RefineInput, str]):
    """Rewrites one scene's image prompt from free-text feedback."""

    @property
    def name(self) -> str:
        return "PromptRefinerAgent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are an expert AI film director. You refine prompts for POV images of a "
            "hand holding a photograph.\n"
            "Reply with the prompt string only, in English, without quotes or commentary."
        )

    def run(self, input_data: RefineInput) -> str:
        self._logger.info(f"Refining prompt: {input_data.request[:60]}")
        response = self._create_message(self._build_prompt(input_data), temperature=0.7)
        refined = response.strip().strip('"').strip()
        return refined or input_data.prompt

    def _build_prompt(self, input_data: RefineInput) -> str:
        return "\n".join([
            f'Current prompt: "{input_data.prompt}"',
            f'Scene content: "{input_data.segment}"',
            f'Requested change: "{input_data.request}"',
            f"Narrator's hands: {input_data.profile.narrator_subject}",
            "",
            "MUST KEEP:",
            "- POV from the narrator looking down at the photograph.",
            "- The photograph fills 85% of the frame, the hand 15%.",
            "- Never show the face of the person holding the photo.",
            "- Rustic, realistic style; nothing fantastical.",
            "- Quality: High-quality 8k, sharp details, realistic lighting.",
        ])
