"""CLI entry point for the storyboard studio."""

import logging
import typer
from pathlib import Path
from typing import Optional
from enum import Enum

from . import __version__
from .config import config
from .errors import StudioError
from .models import ProjectState, VISUAL_STYLES, get_style
from .pipeline import MAX_SEGMENT_CHARS, MIN_SEGMENT_CHARS
from .serializer import default_filename, load_project, save_project, write_prompt_list

app = typer.Typer(
    name="scriptstudio",
    help="AI storyboard builder for narrated scripts",
    no_args_is_help=True
)

PROJECT_OPTION = typer.Option(
    Path("project.json"),
    "--project",
    "-p",
    help="Path to the project JSON file",
    file_okay=True,
    dir_okay=False
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"scriptstudio version {__version__}")
        raise typer.Exit()


def _make_gateway():
    """Build the live AI gateway."""
    from .gateway import StudioGateway

    return StudioGateway()


def _load(project: Path) -> ProjectState:
    if not project.exists():
        typer.echo(f"❌ No project found at {project}")
        typer.echo("   Run 'scriptstudio new' to create one")
        raise typer.Exit(1)
    try:
        return load_project(project)
    except StudioError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)


def _fail(e: Exception) -> None:
    typer.echo(f"❌ Error: {e}")
    raise typer.Exit(1)


def _require_text_model() -> None:
    try:
        config.validate_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """ScriptStudio - Turn a narrated script into an AI storyboard."""
    setup_logging(verbose)


@app.command()
def styles() -> None:
    """List the visual style presets."""
    for style in VISUAL_STYLES:
        typer.echo(f"   {style.id:<10} {style.name} - {style.description}")


@app.command()
def new(
    script_file: Path = typer.Argument(
        ...,
        help="Text file containing the narration script",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Project name (defaults to the script file name)"
    ),
    style: str = typer.Option(
        VISUAL_STYLES[0].id,
        "--style",
        help="Visual style preset (see 'scriptstudio styles')"
    ),
    project: Path = PROJECT_OPTION,
) -> None:
    """Create a project file from a script."""
    try:
        get_style(style)
    except KeyError as e:
        _fail(e)

    state = ProjectState(
        project_name=name or script_file.stem,
        script=script_file.read_text(encoding="utf-8"),
        selected_style=style,
    )
    save_project(state, project)
    typer.echo(f"✅ Project created: {project}")
    typer.echo(f"   Script: {len(state.script)} characters")


@app.command()
def split(
    project: Path = PROJECT_OPTION,
    max_chars: int = typer.Option(
        MAX_SEGMENT_CHARS,
        "--max-chars",
        "-m",
        help="Maximum characters per segment",
        min=MIN_SEGMENT_CHARS,
        max=MAX_SEGMENT_CHARS
    ),
) -> None:
    """Split the script into scenes."""
    from .pipeline import segment_script

    state = _load(project)
    _require_text_model()
    typer.echo(f"✂️  Splitting script (max {max_chars} chars per scene)...")
    try:
        state = segment_script(state, _make_gateway(), max_chars)
    except (StudioError, ValueError) as e:
        _fail(e)

    save_project(state, project)
    typer.echo(f"✅ {state.total} scenes ready")


@app.command()
def profile(
    project: Path = PROJECT_OPTION,
    request: Optional[str] = typer.Option(
        None,
        "--request",
        "-r",
        help="Extra direction for the character designer"
    ),
) -> None:
    """Generate or refine the narrator's character profile."""
    from .pipeline import build_profile

    state = _load(project)
    _require_text_model()
    if request is not None:
        state = state.model_copy(update={"char_edit_request": request})

    typer.echo("🎭 Designing character profile...")
    try:
        state = build_profile(state, _make_gateway())
    except (StudioError, ValueError) as e:
        _fail(e)

    save_project(state, project)
    typer.echo(f"✅ Profile: {state.profile.name}")
    typer.echo(f"   Subject: {state.profile.narrator_subject}")


@app.command("edit-profile")
def edit_profile_cmd(
    project: Path = PROJECT_OPTION,
    name: Optional[str] = typer.Option(None, "--name", help="Character name"),
    info: Optional[str] = typer.Option(None, "--info", help="Background information"),
    appearance: Optional[str] = typer.Option(None, "--appearance", help="Physical appearance"),
    background: Optional[str] = typer.Option(None, "--background", help="Fixed background setting"),
    subject: Optional[str] = typer.Option(None, "--subject", help="Narrator subject used in image prompts"),
) -> None:
    """Edit individual profile fields."""
    from .pipeline import edit_profile

    state = _load(project)
    fields = {
        "name": name,
        "character_info": info,
        "physical_appearance": appearance,
        "fixed_background": background,
        "narrator_subject": subject,
    }
    fields = {key: value for key, value in fields.items() if value is not None}
    if not fields:
        typer.echo("Nothing to change")
        raise typer.Exit(0)

    state = edit_profile(state, **fields)
    save_project(state, project)
    typer.echo(f"✅ Updated: {', '.join(fields)}")


@app.command()
def storyboard(
    project: Path = PROJECT_OPTION,
    auto: bool = typer.Option(
        False,
        "--auto",
        "-a",
        help="Keep running batches until every scene is done"
    ),
    start: Optional[int] = typer.Option(
        None,
        "--start",
        help="1-based scene to start from (defaults to the first pending scene)",
        min=1
    ),
) -> None:
    """Generate scene prompts in batches, resuming where the last run stopped."""
    from .pipeline import BATCH_SIZE, BatchPipeline

    state = _load(project)
    if start is None and state.is_complete:
        typer.echo("✅ All scenes are already done")
        raise typer.Exit(0)
    _require_text_model()

    def publish(current: ProjectState, index: int) -> None:
        save_project(current, project)
        if index >= 0:
            scene = current.scenes[index]
            typer.echo(
                f"   ✅ Scene {scene.id} [{scene.roll_label}] "
                f"{current.cursor}/{current.total} ({current.progress_percent}%)"
            )

    pipeline = BatchPipeline(_make_gateway(), on_progress=publish, auto_continue=auto)
    start_index = state.cursor if start is None else start - 1
    mode = "auto" if auto else f"batch of {BATCH_SIZE}"
    typer.echo(f"🎬 {state.project_name}: scene {start_index + 1} of {state.total} ({mode})")

    try:
        outcome = pipeline.run(state, start_index)
    except (StudioError, OSError) as e:
        _fail(e)

    save_project(outcome.state, project)
    if not outcome.ok:
        typer.echo(f"❌ Stopped: {outcome.error}")
        if auto:
            typer.echo("   Auto mode switched off")
        raise typer.Exit(1)

    if outcome.has_more:
        typer.echo(f"\n⏸  {outcome.state.cursor}/{outcome.state.total} done - run again to continue")
    else:
        typer.echo(f"\n✅ Storyboard complete: {outcome.state.total} scenes")


@app.command()
def refine(
    scene_id: int = typer.Argument(..., help="Scene number"),
    request: str = typer.Argument(..., help="What to change in the image prompt"),
    project: Path = PROJECT_OPTION,
) -> None:
    """Rewrite one scene's image prompt."""
    from .pipeline import refine_scene_prompt

    state = _load(project)
    _require_text_model()
    try:
        state = refine_scene_prompt(state, _make_gateway(), scene_id, request)
    except StudioError as e:
        _fail(e)

    save_project(state, project)
    typer.echo(f"✅ Scene {scene_id} prompt:")
    typer.echo(f"   {state.scene(scene_id).prompt_image}")


@app.command()
def preview(
    scene_id: int = typer.Argument(..., help="Scene number"),
    project: Path = PROJECT_OPTION,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output PNG path"
    ),
) -> None:
    """Render a preview image for a scene with Imagen."""
    from .pipeline import render_scene_preview

    state = _load(project)
    try:
        config.validate_imagen_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    target = output or Path(default_filename(state.project_name, f"_scene_{scene_id}.png"))
    typer.echo(f"🎨 Rendering scene {scene_id}...")
    try:
        saved = render_scene_preview(state, _make_gateway(), scene_id, target)
    except (StudioError, ValueError) as e:
        _fail(e)

    if saved is None:
        typer.echo("⚠️  The image service returned no image")
        raise typer.Exit(1)
    typer.echo(f"✅ Preview saved: {saved}")


@app.command()
def speak(
    scene_id: int = typer.Argument(..., help="Scene number"),
    project: Path = PROJECT_OPTION,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output WAV path"
    ),
) -> None:
    """Narrate a scene's text with Gemini speech."""
    from .pipeline import synthesize_scene_speech

    state = _load(project)
    try:
        config.validate_speech_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    target = output or Path(default_filename(state.project_name, f"_scene_{scene_id}.wav"))
    typer.echo(f"🔊 Narrating scene {scene_id}...")
    try:
        saved = synthesize_scene_speech(state, _make_gateway(), scene_id, target)
    except (StudioError, ValueError) as e:
        _fail(e)
    typer.echo(f"✅ Narration saved: {saved}")


class PromptKind(str, Enum):
    """Prompt list to export."""
    IMAGE = "image"
    VIDEO = "video"


@app.command("export-prompts")
def export_prompts(
    project: Path = PROJECT_OPTION,
    kind: PromptKind = typer.Option(
        PromptKind.IMAGE,
        "--kind",
        "-k",
        help="Which prompts to export"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output text file"
    ),
) -> None:
    """Export image or video prompts, one per line."""
    state = _load(project)
    suffix = "_prompts.txt" if kind == PromptKind.IMAGE else "_visual_narrator_prompts.txt"
    target = output or Path(default_filename(state.project_name, suffix))
    try:
        write_prompt_list(state, target, kind.value)
    except StudioError as e:
        _fail(e)
    typer.echo(f"✅ Prompts saved: {target}")


@app.command()
def status(project: Path = PROJECT_OPTION) -> None:
    """Show project status."""
    state = _load(project)
    typer.echo(f"📁 Project: {state.project_name}")
    typer.echo(f"   Status: {state.status.value}")
    typer.echo(f"   Style: {state.selected_style}")
    if state.profile:
        typer.echo(f"   Narrator: {state.profile.name or '(unnamed)'}")
    else:
        typer.echo("   Narrator: no profile yet")

    if not state.scenes:
        typer.echo("   Scenes: not split yet")
        return

    typer.echo(f"   Progress: {state.cursor}/{state.total} scenes ({state.progress_percent}%)")
    if state.overall_tone:
        typer.echo(f"   Tone: {state.overall_tone}")
    if state.suggested_music_description:
        typer.echo(f"   Music: {state.suggested_music_description}")

    typer.echo("\n📽️  Scenes:")
    for scene in state.scenes:
        status_icon = "✅" if scene.is_enriched else "⏳"
        segment = scene.original_segment
        preview_text = segment[:60] + "..." if len(segment) > 60 else segment
        typer.echo(f"   {status_icon} {scene.id} [{scene.roll_label}] {preview_text}")


if __name__ == "__main__":
    app()
