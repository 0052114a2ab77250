"""Storyboard workflow: segmentation, batch enrichment and per-scene tools.

Every operation takes a ``ProjectState`` and returns a new one; callers
decide what to publish or persist.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .agents.segmenter import TERMINAL_PUNCTUATION
from .errors import GatewayError, MissingInputError, PipelineBusyError, StudioError
from .gateway import AIGateway
from .models import CharacterProfile, ProjectState, Scene
from .prompts import normalize_ws
from .services.speech import write_wav

logger = logging.getLogger(__name__)

BATCH_SIZE = 5
BATCH_DELAY = 0.5  # seconds between chained batches

MIN_SEGMENT_CHARS = 60  # bounds offered by the CLI
MAX_SEGMENT_CHARS = 120


# ---------------------------------------------------------------------------
# Segmentation and profile
# ---------------------------------------------------------------------------

def check_segments(script: str, segments: list[str], max_chars: int) -> list[str]:
    """Return human-readable problems with a segmentation; empty when it looks right."""
    problems = []
    for i, seg in enumerate(segments, 1):
        if len(seg) > max_chars:
            problems.append(f"segment {i} has {len(seg)} chars (limit {max_chars})")
        if not seg.rstrip().endswith(TERMINAL_PUNCTUATION):
            problems.append(f"segment {i} does not end a sentence")
    if normalize_ws("".join(segments)) != normalize_ws(script):
        problems.append("segments do not reproduce the script text")
    return problems


def segment_script(
    state: ProjectState,
    gateway: AIGateway,
    max_chars: int = MAX_SEGMENT_CHARS,
) -> ProjectState:
    """Split the script into pending scenes."""
    if not state.script.strip():
        raise MissingInputError("Please enter a script first.")
    if max_chars < 1:
        raise MissingInputError("Segment length must be at least one character.")

    segments = [seg for seg in gateway.segment(state.script, max_chars) if seg.strip()]
    for problem in check_segments(state.script, segments, max_chars):
        logger.warning(f"Segmentation: {problem}")

    logger.info(f"Script split into {len(segments)} scenes")
    return state.segmented(segments)


def build_profile(state: ProjectState, gateway: AIGateway) -> ProjectState:
    """Generate, or regenerate, the narrator profile."""
    if not state.script.strip():
        raise MissingInputError("Please enter a script first.")
    profile = gateway.profile(state.script, state.char_edit_request, state.profile)
    logger.info(f"Character profile ready: {profile.name or 'unnamed'}")
    return state.with_profile(profile)


def edit_profile(state: ProjectState, **fields: str) -> ProjectState:
    """Replace profile fields with user edits."""
    current = state.profile or CharacterProfile()
    unknown = set(fields) - set(CharacterProfile.model_fields)
    if unknown:
        raise MissingInputError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
    return state.with_profile(current.model_copy(update=fields))


# ---------------------------------------------------------------------------
# Batch enrichment
# ---------------------------------------------------------------------------

@dataclass
class BatchOutcome:
    """What one batch (or a chain of batches) left behind."""

    state: ProjectState
    start_index: int
    end_index: int
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_more(self) -> bool:
        return self.state.cursor < self.state.total


ProgressCallback = Callable[[ProjectState, int], None]


class BatchPipeline:
    """Enriches pending scenes in fixed-size batches.

    Scenes are processed strictly one after another and the new state is
    published through ``on_progress`` after each of them, so progress is
    observable and survives a failure part-way through a batch. Only one
    batch may be in flight at a time.
    """

    def __init__(
        self,
        gateway: AIGateway,
        on_progress: Optional[ProgressCallback] = None,
        auto_continue: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.gateway = gateway
        self.on_progress = on_progress or (lambda state, index: None)
        self.auto_continue = auto_continue
        self._sleep = sleep
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def run_batch(self, state: ProjectState, start_index: int) -> BatchOutcome:
        """Enrich up to ``BATCH_SIZE`` scenes starting at ``start_index``.

        A gateway or validation failure ends the batch early and is returned
        on the outcome; anything else propagates.

        Raises:
            MissingInputError: No narrator subject, or a bad start index.
            PipelineBusyError: Another batch is running.
        """
        if not state.scenes:
            raise MissingInputError("Please split the script into scenes first.")
        profile = state.active_profile()
        if profile is None or not profile.has_subject:
            raise MissingInputError(
                "Please generate the character profile before building the storyboard."
            )
        if not 0 <= start_index <= state.cursor:
            raise MissingInputError(
                f"Cannot start at scene {start_index + 1}: "
                f"only {state.cursor} of {state.total} scenes are done."
            )
        if self._running:
            raise PipelineBusyError("A batch is already running.")

        self._running = True
        end_index = min(start_index + BATCH_SIZE, state.total)
        try:
            if start_index == 0:
                metadata = self.gateway.metadata(state.script)
                state = state.with_metadata(metadata)
                self.on_progress(state, -1)

            logger.info(f"Batch: scenes {start_index + 1}-{end_index} of {state.total}")
            for i in range(start_index, end_index):
                scene = state.scenes[i]
                enriched = self.gateway.enrich(
                    scene.original_segment, i + 1, profile, state.selected_style
                )
                state = state.with_scene(i, enriched)
                logger.info(f"Scene {i + 1}/{state.total} done ({state.scenes[i].roll_label})")
                self.on_progress(state, i)

        except (StudioError, ValueError) as e:
            logger.error(f"Batch stopped at scene {state.cursor + 1}: {e}")
            self.auto_continue = False
            return BatchOutcome(state, start_index, end_index, error=e)

        finally:
            self._running = False

        return BatchOutcome(state, start_index, end_index)

    def run(self, state: ProjectState, start_index: Optional[int] = None) -> BatchOutcome:
        """Run a batch, then keep chaining batches while auto-continue holds."""
        start = state.cursor if start_index is None else start_index
        outcome = self.run_batch(state, start)
        while outcome.ok and self.auto_continue and outcome.end_index < outcome.state.total:
            self._sleep(BATCH_DELAY)
            outcome = self.run_batch(outcome.state, outcome.end_index)
        return outcome


# ---------------------------------------------------------------------------
# Per-scene tools
# ---------------------------------------------------------------------------

def _find_scene(state: ProjectState, scene_id: int) -> tuple[int, Scene]:
    for index, scene in enumerate(state.scenes):
        if scene.id == scene_id:
            return index, scene
    raise MissingInputError(f"No scene with id {scene_id}")


def _enriched_scene(state: ProjectState, scene_id: int) -> tuple[int, Scene]:
    index, scene = _find_scene(state, scene_id)
    if not scene.is_enriched:
        raise MissingInputError(f"Scene {scene_id} has not been generated yet.")
    return index, scene


def refine_scene_prompt(
    state: ProjectState,
    gateway: AIGateway,
    scene_id: int,
    request: str,
) -> ProjectState:
    """Rewrite one scene's image prompt from user feedback."""
    if not request.strip():
        raise MissingInputError("Please describe the change you want.")
    profile = state.active_profile()
    if profile is None:
        raise MissingInputError("Please generate the character profile first.")
    index, scene = _enriched_scene(state, scene_id)

    prompt = gateway.refine_prompt(scene.display_prompt, request, scene.original_segment, profile)
    logger.info(f"Scene {scene_id}: prompt refined")
    return state.with_scene(index, scene.with_prompt(prompt))


def render_scene_preview(
    state: ProjectState,
    gateway: AIGateway,
    scene_id: int,
    output: Path,
) -> Optional[Path]:
    """Render a preview image; returns None when the service produced nothing."""
    _, scene = _enriched_scene(state, scene_id)
    image = gateway.render_preview(scene.display_prompt)
    if not image:
        logger.warning(f"Scene {scene_id}: preview returned no image")
        return None
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image)
    logger.info(f"Scene {scene_id}: preview saved to {output}")
    return output


def synthesize_scene_speech(
    state: ProjectState,
    gateway: AIGateway,
    scene_id: int,
    output: Path,
) -> Path:
    """Narrate a scene's segment and save it as WAV."""
    _, scene = _find_scene(state, scene_id)
    voice = state.profile.voice_identity if state.profile else ""
    pcm = gateway.synthesize_speech(scene.original_segment, voice)
    if not pcm:
        raise GatewayError("No audio data returned")
    write_wav(pcm, output)
    logger.info(f"Scene {scene_id}: narration saved to {output}")
    return output
