"""Project file envelope."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .character import CharacterProfile
from .fields import null_to_default
from .project import DEFAULT_PROJECT_NAME, DEFAULT_STYLE
from .scene import Scene

SCHEMA_VERSION = "scriptstudio.project.v1"

_ENVELOPE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class ScriptAnalysisResult(BaseModel):
    """Profile, scenes and project-level metadata as stored on disk."""

    model_config = _ENVELOPE_CONFIG

    project_name: str = Field(default="")
    main_character: Optional[CharacterProfile] = Field(default=None)
    scenes: List[Scene] = Field(default_factory=list)
    overall_tone: str = Field(default="")
    visual_style: str = Field(default="")
    has_background_music: bool = Field(default=True)
    suggested_music_description: str = Field(default="")

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        return null_to_default(cls, value, info)


class ProjectSaveData(BaseModel):
    """The JSON document written by export and read by import."""

    model_config = _ENVELOPE_CONFIG

    schema_version: str = Field(default=SCHEMA_VERSION)
    project_name: str = Field(default=DEFAULT_PROJECT_NAME)
    script: str = Field(default="")
    custom_char_desc: str = Field(default="")
    selected_style: str = Field(default=DEFAULT_STYLE)
    has_background_music: bool = Field(default=True)
    result: Optional[ScriptAnalysisResult] = Field(default=None)

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        return null_to_default(cls, value, info)

    @field_validator("project_name")
    @classmethod
    def _name_or_default(cls, value: str) -> str:
        return value or DEFAULT_PROJECT_NAME
