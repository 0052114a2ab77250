"""Project state model."""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .character import CharacterProfile
from .scene import Scene

DEFAULT_PROJECT_NAME = "My Story Project"
PENDING_METADATA = "Analyzing..."


class AppStatus(str, Enum):
    """Editing session status."""
    IDLE = "idle"
    COMPLETED = "completed"


class VisualStyle(BaseModel):
    """A selectable visual style preset."""

    id: str
    name: str
    description: str


VISUAL_STYLES = [
    VisualStyle(id="cinematic", name="Master Narrative", description="Direct address, professional lighting"),
    VisualStyle(id="noir", name="Dramatic Noir", description="High contrast, moody atmosphere"),
    VisualStyle(id="soft", name="Soft Intimate", description="Warm haze, gentle focus"),
]

DEFAULT_STYLE = VISUAL_STYLES[0].id


def get_style(style_id: str) -> VisualStyle:
    """Look up a style preset by id."""
    for style in VISUAL_STYLES:
        if style.id == style_id:
            return style
    raise KeyError(f"Unknown visual style: {style_id}")


def enriched_prefix_length(scenes: List[Scene]) -> int:
    """Count the contiguously enriched scenes from the start of the list."""
    count = 0
    for scene in scenes:
        if not scene.is_enriched:
            break
        count += 1
    return count


class ProjectMetadata(BaseModel):
    """Project-level tone and music inferred from the whole script."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    overall_tone: str
    suggested_music_description: str
    visual_style: str


class ProjectState(BaseModel):
    """One editing session.

    Every transition returns a new state; nothing here is mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(default=DEFAULT_PROJECT_NAME, description="Project name")
    script: str = Field(default="", description="Raw script text")
    char_edit_request: str = Field(default="", description="Free-text profile refinement request")
    selected_style: str = Field(default=DEFAULT_STYLE, description="Selected visual style id")
    profile: Optional[CharacterProfile] = Field(default=None, description="Active character profile")
    scenes: List[Scene] = Field(default_factory=list, description="Ordered scenes")
    overall_tone: str = Field(default="")
    suggested_music_description: str = Field(default="")
    visual_style: str = Field(default="")
    has_background_music: bool = Field(default=True)
    cursor: int = Field(default=0, ge=0, description="Contiguously enriched scenes from the start")

    @property
    def status(self) -> AppStatus:
        return AppStatus.COMPLETED if self.scenes else AppStatus.IDLE

    @property
    def segments(self) -> List[str]:
        return [scene.original_segment for scene in self.scenes]

    @property
    def total(self) -> int:
        return len(self.scenes)

    @property
    def is_complete(self) -> bool:
        return bool(self.scenes) and self.cursor >= len(self.scenes)

    @property
    def progress_percent(self) -> int:
        if not self.scenes:
            return 0
        return round(self.cursor / len(self.scenes) * 100)

    def active_profile(self) -> Optional[CharacterProfile]:
        return self.profile.active() if self.profile else None

    def scene(self, scene_id: int) -> Scene:
        """Return the scene with the given 1-based id."""
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        raise KeyError(f"No scene with id {scene_id}")

    def segmented(self, segments: List[str]) -> "ProjectState":
        """Start a fresh storyboard from freshly split segments."""
        scenes = [Scene.pending(i + 1, seg) for i, seg in enumerate(segments)]
        return self.model_copy(update={
            "scenes": scenes,
            "cursor": 0,
            "overall_tone": PENDING_METADATA,
            "suggested_music_description": PENDING_METADATA,
            "visual_style": self.selected_style,
            "has_background_music": True,
        })

    def with_profile(self, profile: Optional[CharacterProfile]) -> "ProjectState":
        return self.model_copy(update={"profile": profile})

    def with_metadata(self, metadata: ProjectMetadata) -> "ProjectState":
        return self.model_copy(update={
            "overall_tone": metadata.overall_tone,
            "suggested_music_description": metadata.suggested_music_description,
            "visual_style": metadata.visual_style,
            "profile": self.active_profile(),
        })

    def with_scene(self, index: int, scene: Scene) -> "ProjectState":
        """Replace the scene at ``index`` wholesale.

        The cursor is recomputed from the scene list and never moves backwards.
        """
        current = self.scenes[index]
        if scene.id != current.id or scene.original_segment != current.original_segment:
            scene = scene.model_copy(update={
                "id": current.id,
                "original_segment": current.original_segment,
            })
        scenes = list(self.scenes)
        scenes[index] = scene
        cursor = max(self.cursor, enriched_prefix_length(scenes))
        return self.model_copy(update={"scenes": scenes, "cursor": cursor})
