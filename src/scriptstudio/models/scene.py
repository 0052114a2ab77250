"""Scene data models."""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .fields import null_to_default

PENDING_SHOT_TYPE = "pending"


class Scene(BaseModel):
    """A single storyboard scene.

    Scenes are immutable: enrichment and prompt refinement replace the
    whole record, so a half-updated scene is never observable.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int = Field(..., description="1-based position assigned at segmentation", ge=1)
    is_b_roll: bool = Field(default=False, description="Illustrative (B-roll) vs direct address (A-roll)")
    original_segment: str = Field(default="", description="Verbatim script segment")
    prompt_image: str = Field(default="", description="Still-image generation prompt")
    visual_prompt: str = Field(default="", description="Mirror of prompt_image")
    visual_narrator_prompt: str = Field(default="", description="Talking-head video prompt")
    motion_description: str = Field(default="")
    emotion_description: str = Field(default="")
    scene_music_suggestion: str = Field(default="")
    dialogue: str = Field(default="")
    shot_type: str = Field(default="")
    camera_angle: str = Field(default="")
    lighting: str = Field(default="")
    background_description: str = Field(default="")

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        return null_to_default(cls, value, info)

    @classmethod
    def pending(cls, scene_id: int, segment: str) -> "Scene":
        """Build the placeholder shown before a segment is enriched."""
        return cls(id=scene_id, original_segment=segment, shot_type=PENDING_SHOT_TYPE)

    @property
    def is_enriched(self) -> bool:
        return bool(self.prompt_image)

    @property
    def display_prompt(self) -> str:
        return self.prompt_image or self.visual_prompt

    @property
    def roll_label(self) -> str:
        if not self.is_enriched:
            return "PENDING"
        return "B-ROLL" if self.is_b_roll else "A-ROLL"

    def with_prompt(self, prompt: str) -> "Scene":
        """Return a copy carrying a new image prompt."""
        return self.model_copy(update={"prompt_image": prompt, "visual_prompt": prompt})


class SceneEnrichment(BaseModel):
    """Validated response of a single enrichment call.

    Every field is required; a reply missing one is rejected rather than
    silently filled in.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    is_b_roll: bool
    prompt_image: str = Field(..., min_length=1)
    visual_narrator_prompt: str
    motion_description: str
    emotion_description: str
    scene_music_suggestion: str
    dialogue: str
    shot_type: str
    camera_angle: str
    lighting: str
    background_description: str

    def to_scene(self, scene_id: int, segment: str) -> Scene:
        """Combine the generated fields with the scene's fixed identity."""
        return Scene(
            id=scene_id,
            original_segment=segment,
            visual_prompt=self.prompt_image,
            **self.model_dump(),
        )
