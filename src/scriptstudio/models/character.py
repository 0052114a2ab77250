"""Character profile data model."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .fields import null_to_default

DEFAULT_NARRATOR_NAME = "Narrator"


class CharacterProfile(BaseModel):
    """The recurring narrator whose hands appear in every image prompt."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(default="", description="Character name")
    character_info: str = Field(default="", description="Background information")
    physical_appearance: str = Field(default="", description="Physical appearance")
    fixed_background: str = Field(default="", description="Room the narrator sits in")
    voice_identity: str = Field(default="", description="Voice description for narration")
    body_language: str = Field(default="", description="Body-language notes")
    cinematography_style: str = Field(default="", description="Cinematography notes")
    narrator_subject: str = Field(
        default="",
        description="Compact subject description injected into every image prompt",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        return null_to_default(cls, value, info)

    @property
    def has_subject(self) -> bool:
        return bool(self.narrator_subject.strip())

    def active(self) -> "CharacterProfile":
        """Return the profile as used for generation, with a default name."""
        if self.name:
            return self
        return self.model_copy(update={"name": DEFAULT_NARRATOR_NAME})
