"""Project tone and music agent."""

from ..models import ProjectMetadata
from .base import BaseAgent, JSON_ONLY


class ProjectMetadataAgent(BaseAgent[str, ProjectMetadata]):
    """Infers overall tone, music and visual style from the full script."""

    @property
    def name(self) -> str:
        return "ProjectMetadataAgent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a film director and music supervisor.\n"
            f"{JSON_ONLY} The JSON object must have the string keys "
            "overallTone, suggestedMusicDescription and visualStyle."
        )

    def run(self, input_data: str) -> ProjectMetadata:
        self._logger.info("Analysing tone and music")
        data = self._create_json(
            f"Analyse the tone and the background music for this script:\n\n{input_data}",
            max_tokens=1024,
        )
        return self._validate(ProjectMetadata, data)
