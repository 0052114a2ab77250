"""Project import/export and prompt list extracts."""

import json
import logging
import re
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from .errors import InvalidProjectFileError, NothingToExportError
from .models import ProjectSaveData, ProjectState, Scene, ScriptAnalysisResult
from .models.project import enriched_prefix_length
from .prompts import strip_highlight

logger = logging.getLogger(__name__)


def export_project(state: ProjectState) -> ProjectSaveData:
    """Snapshot a project into the save envelope."""
    result = None
    if state.scenes or state.profile is not None:
        result = ScriptAnalysisResult(
            project_name=state.project_name,
            main_character=state.profile,
            scenes=state.scenes,
            overall_tone=state.overall_tone,
            visual_style=state.visual_style,
            has_background_music=state.has_background_music,
            suggested_music_description=state.suggested_music_description,
        )

    return ProjectSaveData(
        project_name=state.project_name,
        script=state.script,
        custom_char_desc=state.char_edit_request,
        selected_style=state.selected_style,
        has_background_music=state.has_background_music,
        result=result,
    )


def dumps_project(state: ProjectState) -> str:
    """Serialize a project as indented JSON."""
    data = export_project(state).model_dump(mode="json", by_alias=True)
    return json.dumps(data, ensure_ascii=False, indent=2)


def restore_project(data: ProjectSaveData) -> ProjectState:
    """Rebuild a project from a validated envelope."""
    base = ProjectState(
        project_name=data.project_name,
        script=data.script,
        char_edit_request=data.custom_char_desc,
        selected_style=data.selected_style,
        has_background_music=data.has_background_music,
    )
    result = data.result
    if result is None:
        return base

    return base.model_copy(update={
        "profile": result.main_character,
        "scenes": list(result.scenes),
        "overall_tone": result.overall_tone,
        "suggested_music_description": result.suggested_music_description,
        "visual_style": result.visual_style,
        "has_background_music": result.has_background_music,
        "cursor": enriched_prefix_length(result.scenes),
    })


def import_project(text: str) -> ProjectState:
    """Parse a project file.

    Raises:
        InvalidProjectFileError: The text is not a valid project document.
            Nothing is returned in that case, so the caller's state is untouched.
    """
    try:
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise InvalidProjectFileError("Project file must contain a JSON object")
        data = ProjectSaveData.model_validate(raw)
    except json.JSONDecodeError as e:
        raise InvalidProjectFileError(f"Invalid or corrupted JSON file: {e}") from e
    except ValidationError as e:
        raise InvalidProjectFileError(f"Invalid project file: {e}") from e

    ids = [scene.id for scene in data.result.scenes] if data.result else []
    if len(ids) != len(set(ids)):
        raise InvalidProjectFileError("Invalid project file: duplicate scene ids")

    return restore_project(data)


def save_project(state: ProjectState, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_project(state), encoding="utf-8")
    logger.debug(f"Saved project to {path}")
    return path


def load_project(path: Path) -> ProjectState:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidProjectFileError(f"Cannot read {path}: {e}") from e
    return import_project(text)


# ---------------------------------------------------------------------------
# Plain-text prompt lists
# ---------------------------------------------------------------------------

def _prompt_lines(state: ProjectState, pick: Callable[[Scene], str], label: str) -> str:
    prompts = [pick(scene) for scene in state.scenes if pick(scene)]
    if not prompts:
        raise NothingToExportError(f"No {label} has been generated yet.")
    return "\n".join(
        f"{n}. {strip_highlight(prompt)}" for n, prompt in enumerate(prompts, 1)
    )


def image_prompt_lines(state: ProjectState) -> str:
    return _prompt_lines(state, lambda scene: scene.prompt_image, "image prompt")


def video_prompt_lines(state: ProjectState) -> str:
    return _prompt_lines(state, lambda scene: scene.visual_narrator_prompt, "video prompt")


def default_filename(project_name: str, suffix: str = ".json") -> str:
    """Build a download file name from the project name."""
    return re.sub(r"\s+", "_", project_name) + suffix


def write_prompt_list(state: ProjectState, path: Path, kind: str = "image") -> Path:
    """Write one prompt per line; no file is created when there is nothing to export."""
    extract = {"image": image_prompt_lines, "video": video_prompt_lines}.get(kind)
    if extract is None:
        raise ValueError(f"Unknown prompt kind: {kind}")
    content = extract(state)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {len(content.splitlines())} prompts to {path}")
    return path
