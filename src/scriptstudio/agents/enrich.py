"""Scene enrichment agent."""

from dataclasses import dataclass

from pydantic.alias_generators import to_camel

from ..models import CharacterProfile, Scene, SceneEnrichment, get_style
from ..prompts import span_matches
from .base import BaseAgent, JSON_ONLY

ENRICHMENT_KEYS = [to_camel(name) for name in SceneEnrichment.model_fields]

NARRATOR_PROMPT_TEMPLATE = (
    "Cinematic video of the character from the reference image. The character maintains "
    "their exact facial features, hairstyle, clothing, and position. The background, "
    "lighting, and camera angle must remain 100% identical to the source image without any "
    "changes. The character speaks directly to the camera: \"<HIGHLIGHT>{segment}</HIGHLIGHT>\". "
    "Only the mouth and subtle facial expressions move to match the speech. High-quality, "
    "consistent textures, no background flickering."
)


@dataclass
class EnrichInput:
    """Input data for one enrichment call."""

    segment: str
    scene_id: int
    profile: CharacterProfile
    style: str


class SceneEnrichmentAgent(BaseAgent[EnrichInput, Scene]):
    """Turns one script segment into a fully described storyboard scene.

    The storyboard is told in the first person by a narrator looking back
    through photographs held in their hands: image prompts are POV shots of
    a physical photo, and A-roll scenes get a talking-head video prompt.
    """

    @property
    def name(self) -> str:
        return "SceneEnrichmentAgent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a film director and a veteran of AI video generation. You build "
            "storyboards for first-person stories told through photographs held in the "
            "narrator's hands.\n"
            f"{JSON_ONLY} The JSON object must have these keys: "
            + ", ".join(ENRICHMENT_KEYS)
            + ". isBRoll is a boolean; every other value is an English string."
        )

    def run(self, input_data: EnrichInput) -> Scene:
        self._logger.debug(f"Enriching scene {input_data.scene_id}")
        data = self._create_json(self._build_prompt(input_data), temperature=0.8)
        enrichment = self._validate(SceneEnrichment, data)

        if not span_matches(enrichment.visual_narrator_prompt, input_data.segment):
            self._logger.warning(
                f"Scene {input_data.scene_id}: highlighted line in the video prompt "
                "does not reproduce the segment"
            )
        return enrichment.to_scene(input_data.scene_id, input_data.segment)

    def _build_prompt(self, input_data: EnrichInput) -> str:
        segment = input_data.segment
        profile = input_data.profile
        try:
            style = get_style(input_data.style)
            style_line = f"{style.name} ({style.description})"
        except KeyError:
            style_line = input_data.style

        return "\n".join([
            "SCENE CLASSIFICATION:",
            "- isBRoll = true when the segment describes action, setting or memories, "
            "or illustrates the narration.",
            "- isBRoll = false when the narrator looks into the lens and speaks directly.",
            "",
            "visualNarratorPrompt (talking-head video):",
            "- Follow this template exactly. The text between <HIGHLIGHT> and </HIGHLIGHT> "
            "must be the COMPLETE segment, word for word, punctuation included.",
            "  " + NARRATOR_PROMPT_TEMPLATE.format(segment=segment),
            "",
            "promptImage (still image):",
            "- Perspective: realistic POV from the narrator's eyes, looking down at a photograph.",
            "- Layout: the physical photograph fills exactly 85% of the frame; the hand holding it "
            f"({profile.narrator_subject}) takes the remaining 15% at the edges or corners.",
            "- Vary how the photo is held (one hand, two hands, slight tilt, straight top-down).",
            "- Strict rule: never show the narrator's face, only hands and part of a sleeve.",
            "- Inside the photo: grounded, rustic and believable, faithful to the segment, "
            "with people doing concrete things with natural expressions.",
            "- Quality: High-quality 8k, sharp details, realistic lighting, rustic cinematic style.",
            f"- Outside the photo: a softly blurred {profile.fixed_background} room, "
            "natural light falling on the photograph.",
            f"- Visual style: {style_line}.",
            "",
            f"SCENE NUMBER: {input_data.scene_id}",
            f'SEGMENT: "{segment}"',
        ])
