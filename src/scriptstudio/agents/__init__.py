"""AI agents for script analysis and prompt writing."""

from .base import BaseAgent
from .enrich import EnrichInput, SceneEnrichmentAgent
from .metadata import ProjectMetadataAgent
from .profile import CharacterProfileAgent, ProfileInput
from .refiner import PromptRefinerAgent, RefineInput
from .segmenter import SegmentInput, SegmenterAgent

__all__ = [
    "BaseAgent",
    "EnrichInput",
    "SceneEnrichmentAgent",
    "ProjectMetadataAgent",
    "CharacterProfileAgent",
    "ProfileInput",
    "PromptRefinerAgent",
    "RefineInput",
    "SegmentInput",
    "SegmenterAgent",
]
