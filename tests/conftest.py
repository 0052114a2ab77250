"""Shared fixtures: a scripted stand-in for the AI gateway."""

from __future__ import annotations

import re
from typing import List, Optional

import pytest

from scriptstudio.errors import GatewayError
from scriptstudio.models import (
    CharacterProfile,
    ProjectMetadata,
    ProjectState,
    Scene,
    SceneEnrichment,
)


def split_sentences(text: str) -> List[str]:
    """Split after each terminal mark, keeping the text verbatim."""
    return [s for s in re.findall(r"[^.?!]*[.?!]+\s*", text) if s.strip()]


class FakeGateway:
    """In-memory AIGateway that records every call."""

    def __init__(self, fail_on: Optional[set] = None, image: bytes = b"PNGDATA", audio: bytes = b"\x00\x01" * 8):
        self.fail_on = set(fail_on or ())
        self.image = image
        self.audio = audio
        self.calls: List[tuple] = []

    def segment(self, text: str, max_chars: int) -> List[str]:
        self.calls.append(("segment", max_chars))
        return split_sentences(text)

    def profile(self, text, edit_request="", prior=None) -> CharacterProfile:
        self.calls.append(("profile", edit_request, prior))
        return make_profile(name="Grandpa Lu" if not edit_request else f"Grandpa Lu ({edit_request})")

    def metadata(self, text: str) -> ProjectMetadata:
        self.calls.append(("metadata",))
        return ProjectMetadata(
            overall_tone="nostalgic",
            suggested_music_description="soft piano",
            visual_style="warm film",
        )

    def enrich(self, segment: str, display_id: int, profile: CharacterProfile, style: str) -> Scene:
        self.calls.append(("enrich", display_id))
        if display_id in self.fail_on:
            raise GatewayError(f"service unavailable for scene {display_id}")
        return make_enrichment(display_id).to_scene(display_id, segment)

    def refine_prompt(self, prompt, request, segment, profile) -> str:
        self.calls.append(("refine", request))
        return f"{prompt} | {request}"

    def render_preview(self, prompt: str) -> bytes:
        self.calls.append(("preview", prompt))
        return self.image

    def synthesize_speech(self, text: str, voice_description: str) -> bytes:
        self.calls.append(("speech", text, voice_description))
        return self.audio

    def enrich_ids(self) -> List[int]:
        return [call[1] for call in self.calls if call[0] == "enrich"]


def make_profile(**overrides) -> CharacterProfile:
    fields = dict(
        name="Grandpa Lu",
        character_info="A retired fisherman",
        physical_appearance="weathered, seventy years old",
        fixed_background="wooden stilt house",
        voice_identity="warm, slow baritone",
        body_language="calm",
        cinematography_style="handheld, natural light",
        narrator_subject="wrinkled, sun-tanned hands of a 70-year-old man in a faded blue shirt",
    )
    fields.update(overrides)
    return CharacterProfile(**fields)


def make_enrichment(display_id: int, **overrides) -> SceneEnrichment:
    fields = dict(
        is_b_roll=display_id % 2 == 0,
        prompt_image=f"POV photo prompt {display_id}",
        visual_narrator_prompt=f"Speaks: <HIGHLIGHT>line {display_id}</HIGHLIGHT>.",
        motion_description="slow push in",
        emotion_description="wistful",
        scene_music_suggestion="rain on a tin roof",
        dialogue="",
        shot_type="close-up",
        camera_angle="top-down",
        lighting="window light",
        background_description="blurred wooden room",
    )
    fields.update(overrides)
    return SceneEnrichment(**fields)


SCRIPT = (
    "I was born by the river. My father mended nets every morning. "
    "We had one boat and one dream. The flood came in my tenth year. "
    "We rebuilt the house on stilts."
)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def profile() -> CharacterProfile:
    return make_profile()


@pytest.fixture
def segmented(profile) -> ProjectState:
    """Five pending scenes with a ready profile."""
    state = ProjectState(project_name="River Story", script=SCRIPT, profile=profile)
    return state.segmented(split_sentences(SCRIPT))
