"""Project file and prompt list tests."""

from __future__ import annotations

import json

import pytest

from scriptstudio.errors import InvalidProjectFileError, NothingToExportError
from scriptstudio.models import ProjectState
from scriptstudio.models.save_data import SCHEMA_VERSION
from scriptstudio.pipeline import BatchPipeline
from scriptstudio.serializer import (
    default_filename,
    dumps_project,
    image_prompt_lines,
    import_project,
    load_project,
    save_project,
    video_prompt_lines,
    write_prompt_list,
)

from conftest import FakeGateway, make_profile


@pytest.fixture
def partial(segmented) -> ProjectState:
    """Two of five scenes enriched, then a failure."""
    pipeline = BatchPipeline(FakeGateway(fail_on={3}), sleep=lambda s: None)
    return pipeline.run_batch(segmented, 0).state


def test_round_trip_keeps_everything(partial):
    restored = import_project(dumps_project(partial))
    assert restored == partial
    assert restored.cursor == 2


def test_round_trip_before_segmentation():
    state = ProjectState(project_name="Draft", script="Once.", char_edit_request="older")
    restored = import_project(dumps_project(state))
    assert restored == state
    assert restored.scenes == []


def test_round_trip_with_profile_only(profile):
    state = ProjectState(script="Once.", profile=profile)
    assert import_project(dumps_project(state)) == state


def test_export_uses_camel_case_keys(partial):
    data = json.loads(dumps_project(partial))
    assert data["schemaVersion"] == SCHEMA_VERSION
    assert data["projectName"] == "River Story"
    assert data["result"]["mainCharacter"]["narratorSubject"]
    scene = data["result"]["scenes"][0]
    assert scene["originalSegment"] == "I was born by the river. "
    assert scene["isBRoll"] is False
    assert "cursor" not in data


def test_no_result_without_storyboard():
    data = json.loads(dumps_project(ProjectState(script="Once.")))
    assert data["result"] is None


def test_import_without_result_is_pre_segmentation():
    text = json.dumps({"projectName": "Draft", "script": "Once.", "customCharDesc": "older"})
    state = import_project(text)
    assert state.project_name == "Draft"
    assert state.char_edit_request == "older"
    assert state.scenes == []
    assert state.profile is None
    assert state.cursor == 0


def test_import_fills_missing_scene_fields():
    text = json.dumps({
        "projectName": "Old file",
        "script": "A. B.",
        "result": {
            "scenes": [
                {"id": 1, "originalSegment": "A. ", "promptImage": "hands"},
                {"id": 2, "originalSegment": "B."},
            ],
        },
    })
    state = import_project(text)
    assert state.scenes[0].is_enriched
    assert state.scenes[1].visual_narrator_prompt == ""
    assert state.cursor == 1
    assert state.selected_style == "cinematic"


def test_import_cursor_stops_at_first_pending_scene():
    scenes = [
        {"id": 1, "originalSegment": "A. ", "promptImage": "one"},
        {"id": 2, "originalSegment": "B. "},
        {"id": 3, "originalSegment": "C.", "promptImage": "three"},
    ]
    state = import_project(json.dumps({"script": "A. B. C.", "result": {"scenes": scenes}}))
    assert state.cursor == 1


@pytest.mark.parametrize("text", [
    "{not json",
    "[1, 2, 3]",
    '"a string"',
    json.dumps({"result": {"scenes": [{"originalSegment": "no id"}]}}),
    json.dumps({"result": {"scenes": "nope"}}),
])
def test_import_rejects_malformed_files(text):
    with pytest.raises(InvalidProjectFileError):
        import_project(text)


def test_import_rejects_duplicate_scene_ids():
    scenes = [{"id": 1, "originalSegment": "A."}, {"id": 1, "originalSegment": "B."}]
    with pytest.raises(InvalidProjectFileError, match="duplicate"):
        import_project(json.dumps({"result": {"scenes": scenes}}))


def test_save_and_load(partial, tmp_path):
    path = save_project(partial, tmp_path / "nested" / "story.json")
    assert load_project(path) == partial


def test_load_missing_file(tmp_path):
    with pytest.raises(InvalidProjectFileError):
        load_project(tmp_path / "missing.json")


def test_image_prompt_list_skips_pending(partial):
    assert image_prompt_lines(partial) == "1. POV photo prompt 1\n2. POV photo prompt 2"


def test_video_prompt_list_strips_highlight(partial):
    assert video_prompt_lines(partial) == "1. Speaks: line 1.\n2. Speaks: line 2."


def test_nothing_to_export(segmented, tmp_path):
    with pytest.raises(NothingToExportError):
        image_prompt_lines(segmented)
    target = tmp_path / "prompts.txt"
    with pytest.raises(NothingToExportError):
        write_prompt_list(segmented, target, "video")
    assert not target.exists()


def test_write_prompt_list(partial, tmp_path):
    path = write_prompt_list(partial, tmp_path / "image.txt", "image")
    assert path.read_text(encoding="utf-8").splitlines() == [
        "1. POV photo prompt 1",
        "2. POV photo prompt 2",
    ]
    with pytest.raises(ValueError):
        write_prompt_list(partial, tmp_path / "x.txt", "audio")


def test_default_filename():
    assert default_filename("My Story  Project") == "My_Story_Project.json"
    assert default_filename("River Story", "_Image_Prompts.txt") == "River_Story_Image_Prompts.txt"


def test_unicode_survives(tmp_path):
    state = ProjectState(project_name="Chuyện quê", script="Tôi sinh ra bên sông.", profile=make_profile(name="Ông Lữ"))
    path = save_project(state, tmp_path / "vi.json")
    assert "Chuyện quê" in path.read_text(encoding="utf-8")
    assert load_project(path) == state


def test_import_treats_null_as_missing():
    text = json.dumps({
        "projectName": None,
        "script": None,
        "customCharDesc": None,
        "selectedStyle": None,
        "hasBackgroundMusic": None,
        "result": None,
    })
    state = import_project(text)
    assert state.project_name == "My Story Project"
    assert state.script == ""
    assert state.char_edit_request == ""
    assert state.selected_style == "cinematic"
    assert state.has_background_music is True


def test_import_null_fields_inside_result():
    character = make_profile().model_dump(by_alias=True)
    character["voiceIdentity"] = None
    text = json.dumps({
        "projectName": "",
        "script": "A.",
        "result": {
            "mainCharacter": character,
            "overallTone": None,
            "suggestedMusicDescription": None,
            "scenes": [
                {"id": 1, "originalSegment": "A.", "promptImage": "hands", "dialogue": None, "isBRoll": None},
            ],
        },
    })
    state = import_project(text)
    assert state.project_name == "My Story Project"
    assert state.profile.voice_identity == ""
    assert state.profile.narrator_subject == make_profile().narrator_subject
    assert state.overall_tone == ""
    assert state.scenes[0].dialogue == ""
    assert state.scenes[0].is_b_roll is False
    assert state.cursor == 1


def test_null_scene_id_is_still_invalid():
    scenes = [{"id": None, "originalSegment": "A."}]
    with pytest.raises(InvalidProjectFileError):
        import_project(json.dumps({"result": {"scenes": scenes}}))
