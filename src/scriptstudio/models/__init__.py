"""Data models for the storyboard studio."""

from .character import CharacterProfile
from .scene import Scene, SceneEnrichment
from .project import (
    AppStatus,
    ProjectMetadata,
    ProjectState,
    VISUAL_STYLES,
    VisualStyle,
    get_style,
)
from .save_data import ProjectSaveData, ScriptAnalysisResult

__all__ = [
    "CharacterProfile",
    "Scene",
    "SceneEnrichment",
    "AppStatus",
    "ProjectMetadata",
    "ProjectState",
    "VISUAL_STYLES",
    "VisualStyle",
    "get_style",
    "ProjectSaveData",
    "ScriptAnalysisResult",
]
