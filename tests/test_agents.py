"""Agent tests against a scripted Claude client."""

from __future__ import annotations

import json

import pytest

from scriptstudio.agents import (
    CharacterProfileAgent,
    EnrichInput,
    ProfileInput,
    ProjectMetadataAgent,
    PromptRefinerAgent,
    RefineInput,
    SceneEnrichmentAgent,
    SegmentInput,
    SegmenterAgent,
)
from scriptstudio.agents.base import extract_json
from scriptstudio.agents.profile import PROFILE_KEYS
from scriptstudio.errors import GatewayError

from conftest import make_enrichment, make_profile


class FakeClient:
    """Stands in for AnthropicClient; replays canned replies."""

    model = "test-model"

    def __init__(self, *replies: str):
        self.replies = list(replies)
        self.prompts = []

    def create_message(self, prompt, max_tokens=4096, system=None, temperature=0.7):
        self.prompts.append({"prompt": prompt, "system": system, "temperature": temperature})
        return self.replies.pop(0)


def _agent(agent_cls, *replies):
    client = FakeClient(*replies)
    return agent_cls(client=client, model=client.model), client


def test_extract_json_from_fenced_block():
    text = 'Here you go:\n```json\n{"a": [1, 2]}\n```\nEnjoy.'
    assert json.loads(extract_json(text)) == {"a": [1, 2]}


def test_extract_json_picks_first_bracket():
    text = 'Sure! ["One. ", "Two {not json}."] trailing'
    assert json.loads(extract_json(text)) == ["One. ", "Two {not json}."]


def test_extract_json_ignores_brackets_in_strings():
    text = 'prefix {"prompt": "a } b", "n": 1} suffix'
    assert json.loads(extract_json(text)) == {"prompt": "a } b", "n": 1}


def test_segmenter_returns_strings():
    agent, client = _agent(SegmenterAgent, '["A. ", "B."]')
    assert agent.run(SegmentInput(text="A. B.", max_chars=80)) == ["A. ", "B."]
    assert "80 characters" in client.prompts[0]["prompt"]
    assert client.prompts[0]["temperature"] == 0.0


def test_segmenter_accepts_wrapped_list():
    agent, _ = _agent(SegmenterAgent, '{"segments": ["A."]}')
    assert agent.run(SegmentInput(text="A.", max_chars=80)) == ["A."]


def test_segmenter_rejects_non_list():
    agent, _ = _agent(SegmenterAgent, '{"text": "A."}')
    with pytest.raises(GatewayError):
        agent.run(SegmentInput(text="A.", max_chars=80))


def test_invalid_json_is_gateway_error():
    agent, _ = _agent(SegmenterAgent, "I cannot help with that")
    with pytest.raises(GatewayError):
        agent.run(SegmentInput(text="A.", max_chars=80))


def test_profile_agent_includes_prior_and_request():
    reply = json.dumps(make_profile().model_dump(by_alias=True))
    agent, client = _agent(CharacterProfileAgent, reply)
    prior = make_profile(name="Old Lu")

    profile = agent.run(ProfileInput(script="I was born.", edit_request="younger", current=prior))

    assert profile == make_profile()
    prompt = client.prompts[0]["prompt"]
    assert "Old Lu" in prompt
    assert 'ADDITIONAL USER REQUEST: "younger"' in prompt


def test_profile_agent_rejects_missing_fields():
    data = make_profile().model_dump(by_alias=True)
    del data["voiceIdentity"]
    agent, _ = _agent(CharacterProfileAgent, json.dumps(data))
    with pytest.raises(GatewayError, match="voiceIdentity"):
        agent.run(ProfileInput(script="I was born."))


def test_profile_agent_rejects_empty_subject():
    data = make_profile(narrator_subject=" ").model_dump(by_alias=True)
    agent, _ = _agent(CharacterProfileAgent, json.dumps(data))
    with pytest.raises(GatewayError):
        agent.run(ProfileInput(script="I was born."))


def test_profile_keys_are_camel_case():
    assert "narratorSubject" in PROFILE_KEYS
    assert "fixedBackground" in PROFILE_KEYS


def test_metadata_agent():
    reply = '{"overallTone": "calm", "suggestedMusicDescription": "cello", "visualStyle": "grainy"}'
    agent, _ = _agent(ProjectMetadataAgent, reply)
    metadata = agent.run("I was born.")
    assert metadata.overall_tone == "calm"
    assert metadata.suggested_music_description == "cello"


def test_metadata_agent_rejects_partial_reply():
    agent, _ = _agent(ProjectMetadataAgent, '{"overallTone": "calm"}')
    with pytest.raises(GatewayError):
        agent.run("I was born.")


def _enrich_input(segment="We had one boat.", style="noir"):
    return EnrichInput(segment=segment, scene_id=3, profile=make_profile(), style=style)


def test_enrichment_agent_builds_scene():
    reply = json.dumps(make_enrichment(3).model_dump(by_alias=True))
    agent, client = _agent(SceneEnrichmentAgent, reply)

    scene = agent.run(_enrich_input())

    assert scene.id == 3
    assert scene.original_segment == "We had one boat."
    assert scene.visual_prompt == scene.prompt_image
    prompt = client.prompts[0]["prompt"]
    assert "<HIGHLIGHT>We had one boat.</HIGHLIGHT>" in prompt
    assert "Dramatic Noir" in prompt
    assert "wrinkled, sun-tanned hands" in prompt


def test_enrichment_agent_rejects_missing_field():
    data = make_enrichment(3).model_dump(by_alias=True)
    del data["lighting"]
    agent, _ = _agent(SceneEnrichmentAgent, json.dumps(data))
    with pytest.raises(GatewayError):
        agent.run(_enrich_input())


def test_enrichment_agent_rejects_array_reply():
    agent, _ = _agent(SceneEnrichmentAgent, "[1, 2, 3]")
    with pytest.raises(GatewayError):
        agent.run(_enrich_input())


def test_enrichment_warns_on_altered_line(caplog):
    data = make_enrichment(3, visual_narrator_prompt="speaks: <HIGHLIGHT>Something else.</HIGHLIGHT>")
    agent, _ = _agent(SceneEnrichmentAgent, json.dumps(data.model_dump(by_alias=True)))
    scene = agent.run(_enrich_input())
    assert scene.is_enriched
    assert "does not reproduce the segment" in caplog.text


def test_enrichment_accepts_unknown_style():
    reply = json.dumps(make_enrichment(3).model_dump(by_alias=True))
    agent, client = _agent(SceneEnrichmentAgent, reply)
    agent.run(_enrich_input(style="pastel watercolour"))
    assert "Visual style: pastel watercolour." in client.prompts[0]["prompt"]


def _refine_input():
    return RefineInput(
        prompt="POV photo of a boat",
        request="add rain",
        segment="We had one boat.",
        profile=make_profile(),
    )


def test_refiner_strips_quotes():
    agent, client = _agent(PromptRefinerAgent, '  "POV photo of a boat in the rain"\n')
    assert agent.run(_refine_input()) == "POV photo of a boat in the rain"
    assert 'Requested change: "add rain"' in client.prompts[0]["prompt"]


def test_refiner_keeps_prompt_on_empty_reply():
    agent, _ = _agent(PromptRefinerAgent, '""')
    assert agent.run(_refine_input()) == "POV photo of a boat"
