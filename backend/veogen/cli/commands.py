"""CLI commands for veogen using Typer and Rich.

Implements:
- generate: Build a request from options/files and run it to completion
- modes: Show the generation modes and the settings each one locks
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from google.genai import types
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from veogen import validate_credentials
from veogen.config import settings
from veogen.errors import GenerationError
from veogen.orchestrator.pipeline import VideoGenerator, plan_steps
from veogen.pipeline.video_gen import PollPolicy
from veogen.schemas.generation import (
    AspectRatio,
    GenerationMode,
    GenerationRequest,
    ImageInput,
    Resolution,
    VeoModel,
)
from veogen.schemas.modes import MODE_PROFILES, apply_mode_profile, request_problem
from veogen.services.file_manager import FileManager
from veogen.services.veo import get_video_adapter

app = typer.Typer(name="veogen", help="Veo video generation from prompts, frames, references and stories")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for all commands."""
    level = logging.DEBUG if verbose else settings.logging.level
    logging.basicConfig(level=level, format=settings.logging.format)


def _parse_reference(value: str) -> ImageInput:
    """Parse ``PATH[=LABEL]`` into an ImageInput."""
    path_str, _, label = value.partition("=")
    path = Path(path_str)
    if not path.is_file():
        raise typer.BadParameter(f"Reference image not found: {path}")
    try:
        return ImageInput.from_path(path, description=label.strip())
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _load_image(value: Optional[str]) -> Optional[ImageInput]:
    """Load an image from a file path or a ``data:<mime>;base64,...`` URL."""
    if value is None:
        return None
    if value.startswith("data:"):
        mime_type = value[len("data:"):].split(",", 1)[0].split(";", 1)[0]
        if not mime_type.startswith("image/"):
            raise typer.BadParameter(f"Not an image data URL: {mime_type or '(no type)'}")
        try:
            return ImageInput.from_base64(value, mime_type)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid base64 image data: {e}")

    path = Path(value)
    if not path.is_file():
        raise typer.BadParameter(f"Image not found: {path}")
    try:
        return ImageInput.from_path(path)
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command()
def generate(
    prompt: str = typer.Option("", "--prompt", "-p", help="Text prompt"),
    mode: GenerationMode = typer.Option(GenerationMode.TEXT_TO_VIDEO, "--mode", "-m", help="Generation mode"),
    scene: Optional[List[str]] = typer.Option(None, "--scene", "-s", help="Story scene prompt (repeat, in order)"),
    model: VeoModel = typer.Option(VeoModel.VEO_FAST, "--model", help="Veo model"),
    aspect_ratio: AspectRatio = typer.Option(AspectRatio.LANDSCAPE, "--aspect-ratio", "-a", help="Video aspect ratio"),
    resolution: Resolution = typer.Option(Resolution.P720, "--resolution", "-r", help="Output resolution"),
    start_frame: Optional[str] = typer.Option(None, "--start-frame", help="First frame image (path or data: URL)"),
    end_frame: Optional[str] = typer.Option(None, "--end-frame", help="Last frame image (path or data: URL)"),
    loop: bool = typer.Option(False, "--loop", help="Use the start frame as the last frame"),
    reference: Optional[List[str]] = typer.Option(None, "--reference", help="Reference image as PATH[=LABEL] (repeat)"),
    style_image: Optional[str] = typer.Option(None, "--style-image", help="Style reference image (path or data: URL)"),
    extend_uri: Optional[str] = typer.Option(None, "--extend-uri", help="URI of a previously generated video to extend"),
    max_polls: Optional[int] = typer.Option(None, "--max-polls", min=1, help="Stop after this many status polls"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=1, help="Stop polling after this many seconds"),
):
    """Generate a video and save it locally.

    Applies the locks of the chosen mode (model, aspect ratio, resolution),
    validates the request, then submits and polls until the video is ready.
    """
    # Fail-fast credential validation
    try:
        validate_credentials()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)

    request = GenerationRequest(
        mode=mode,
        prompt=prompt,
        story_prompts=tuple(scene or ()),
        model=model,
        aspect_ratio=aspect_ratio,
        resolution=resolution,
        start_frame=_load_image(start_frame),
        end_frame=_load_image(end_frame),
        is_looping=loop,
        reference_images=tuple(_parse_reference(r) for r in reference or ()),
        style_image=_load_image(style_image),
        input_video=types.Video(uri=extend_uri) if extend_uri else None,
    )
    request = apply_mode_profile(request)

    problem = request_problem(request)
    if problem:
        console.print(f"[red]Error:[/red] {problem}")
        raise typer.Exit(code=1)

    policy = PollPolicy.from_settings(settings.generation)
    if max_polls is not None:
        policy = policy.model_copy(update={"max_attempts": max_polls})
    if timeout is not None:
        policy = policy.model_copy(update={"timeout": timeout})

    step_count = len(plan_steps(request))
    console.print(Panel(
        f"[bold]{MODE_PROFILES[request.mode].label}[/bold]\n"
        f"Model: {request.model.value}  Aspect: {request.aspect_ratio.value}  "
        f"Resolution: {request.resolution.value}\n"
        f"Steps: {step_count}  Poll interval: {policy.interval:g}s",
        title="veogen",
    ))

    # asyncio.run cancels the task on Ctrl-C and re-raises KeyboardInterrupt here
    try:
        asyncio.run(_generate_async(request, policy))
    except KeyboardInterrupt:
        console.print()
        console.print("[yellow]Interrupted. Submitted jobs keep running server-side.[/yellow]")
        raise typer.Exit(code=130)


async def _generate_async(request: GenerationRequest, policy: PollPolicy):
    """Async implementation of generate command."""
    adapter = get_video_adapter()
    generator = VideoGenerator(adapter, FileManager(), poll_policy=policy)

    try:
        with console.status("[bold green]Submitting...") as status:
            def progress_callback(msg: str):
                status.update(f"[bold green]{msg}")

            result = await generator.generate(request, progress_callback=progress_callback)

        console.print("[green]✓[/green] Video generation complete!")
        console.print(f"[green]Output:[/green] {result.local_path}")
        console.print(f"[green]Source:[/green] {result.source_uri}")
        console.print(f"Extend it with: veogen generate --mode extend_video --extend-uri '{result.video.uri}'")

    except GenerationError as e:
        console.print()
        console.print(f"[red]✗ Generation failed:[/red] {type(e).__name__}: {str(e)}")
        raise typer.Exit(code=1)

    finally:
        await adapter.close()


@app.command()
def modes():
    """List generation modes and the settings they lock."""
    table = Table(title="Generation Modes")
    table.add_column("Mode", style="cyan")
    table.add_column("Label")
    table.add_column("Model")
    table.add_column("Aspect")
    table.add_column("Resolution")
    table.add_column("Max refs", justify="right")

    for mode, profile in MODE_PROFILES.items():
        name = mode.value if profile.selectable else f"{mode.value} (from a result)"
        table.add_row(
            name,
            profile.label,
            profile.forced_model.value if profile.forced_model else "any",
            profile.forced_aspect_ratio.value if profile.forced_aspect_ratio else "any",
            profile.forced_resolution.value if profile.forced_resolution else "any",
            str(profile.max_reference_images),
        )

    console.print(table)
