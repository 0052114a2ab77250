"""Character profile agent."""

from dataclasses import dataclass
from typing import Optional

from pydantic.alias_generators import to_camel

from ..errors import GatewayError
from ..models import CharacterProfile
from .base import BaseAgent, JSON_ONLY

PROFILE_KEYS = [to_camel(name) for name in CharacterProfile.model_fields]


@dataclass
class ProfileInput:
    """Input data for the profile agent."""

    script: str
    edit_request: str = ""
    current: Optional[CharacterProfile] = None


class CharacterProfileAgent(BaseAgent[ProfileInput, CharacterProfile]):
    """Derives the narrator's profile from the script.

    The ``narratorSubject`` field is the piece every image prompt reuses, so
    a reply without it is rejected.
    """

    @property
    def name(self) -> str:
        return "CharacterProfileAgent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a film character designer. You analyse narration scripts and "
            "describe the narrator so image and video models can render them consistently.\n"
            f"{JSON_ONLY} The JSON object must have exactly these string keys: "
            + ", ".join(PROFILE_KEYS) + "."
        )

    def run(self, input_data: ProfileInput) -> CharacterProfile:
        self._logger.info(
            "Refining character profile" if input_data.current else "Generating character profile"
        )
        data = self._create_json(self._build_prompt(input_data), temperature=0.7)
        if not isinstance(data, dict):
            raise GatewayError("Profile response is not a JSON object")

        missing = [key for key in PROFILE_KEYS if key not in data]
        if missing:
            raise GatewayError(f"Profile response is missing fields: {', '.join(missing)}")

        profile = self._validate(CharacterProfile, data)
        if not profile.has_subject:
            raise GatewayError("Profile response has an empty narratorSubject")
        return profile

    def _build_prompt(self, input_data: ProfileInput) -> str:
        parts = [
            "TASKS:",
            "1. Analyse the main character (the narrator).",
            '2. Write "narratorSubject": a compact 30-50 word description of the narrator\'s '
            "appearance, hands, clothing and age, used verbatim as image-model input.",
        ]
        if input_data.current:
            parts.extend([
                "",
                "CURRENT PROFILE:",
                input_data.current.model_dump_json(by_alias=True, indent=2),
            ])
        if input_data.edit_request:
            parts.extend(["", f'ADDITIONAL USER REQUEST: "{input_data.edit_request}"'])
        parts.extend(["", f"SCRIPT: {input_data.script}"])
        return "\n".join(parts)
