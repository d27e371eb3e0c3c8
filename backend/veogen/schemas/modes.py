"""Per-mode configuration locks and submission rules.

Each generation mode declares, as data, which configuration values it forces
(model, aspect ratio, resolution), how many reference images it accepts and
what the prompt box should suggest. Adding a mode means adding a table entry
and, if it has submission rules, a checker; no control flow changes.

Usage:
    from veogen.schemas.modes import apply_mode_profile, validate_request

    request = apply_mode_profile(request)
    validate_request(request)   # raises InvalidRequest
"""

from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from veogen.config import settings
from veogen.errors import InvalidRequest
from veogen.schemas.generation import (
    AspectRatio,
    GenerationMode,
    GenerationRequest,
    Resolution,
    VeoModel,
)


class ModeProfile(BaseModel):
    """Declarative description of one generation mode."""

    model_config = ConfigDict(frozen=True)

    label: str
    placeholder: str
    forced_model: Optional[VeoModel] = None
    forced_aspect_ratio: Optional[AspectRatio] = None
    forced_resolution: Optional[Resolution] = None
    max_reference_images: int = 0
    # extend_video is entered from a finished result, not picked directly
    selectable: bool = True


MODE_PROFILES: dict[GenerationMode, ModeProfile] = {
    GenerationMode.TEXT_TO_VIDEO: ModeProfile(
        label="Text to Video",
        placeholder="Describe the video you want to create...",
    ),
    GenerationMode.STORY: ModeProfile(
        label="Story Mode",
        placeholder="Describe the opening scene...",
        forced_model=VeoModel.VEO,
        forced_resolution=Resolution.P720,
        max_reference_images=settings.generation.max_reference_images,
    ),
    GenerationMode.FRAMES_TO_VIDEO: ModeProfile(
        label="Frames to Video",
        placeholder="Describe motion between start and end frames (optional)...",
    ),
    GenerationMode.REFERENCES_TO_VIDEO: ModeProfile(
        label="References to Video",
        placeholder="Describe a video using reference assets...",
        forced_model=VeoModel.VEO,
        forced_aspect_ratio=AspectRatio.LANDSCAPE,
        forced_resolution=Resolution.P720,
        max_reference_images=settings.generation.max_reference_images,
    ),
    GenerationMode.EXTEND_VIDEO: ModeProfile(
        label="Extend Video",
        placeholder="Describe what happens next (optional)...",
        forced_resolution=Resolution.P720,
        selectable=False,
    ),
}


def apply_mode_profile(request: GenerationRequest) -> GenerationRequest:
    """Return ``request`` with the forced values of its mode applied."""
    profile = MODE_PROFILES[request.mode]
    updates = {}
    if profile.forced_model is not None:
        updates["model"] = profile.forced_model
    if profile.forced_aspect_ratio is not None:
        updates["aspect_ratio"] = profile.forced_aspect_ratio
    if profile.forced_resolution is not None:
        updates["resolution"] = profile.forced_resolution

    if not updates:
        return request
    return request.model_copy(update=updates)


# ---------------------------------------------------------------------------
# Submission rules
# ---------------------------------------------------------------------------
def _check_text(request: GenerationRequest) -> Optional[str]:
    if not request.prompt.strip():
        return "Please enter a prompt."
    return None


def _check_story(request: GenerationRequest) -> Optional[str]:
    if not request.story_prompts or any(not p.strip() for p in request.story_prompts):
        return "Please describe every scene in the story."
    max_prompts = settings.generation.max_story_prompts
    if len(request.story_prompts) > max_prompts:
        return f"A story can have at most {max_prompts} scenes."
    return None


def _check_frames(request: GenerationRequest) -> Optional[str]:
    if request.start_frame is None:
        return "A start frame is required."
    return None


def _check_references(request: GenerationRequest) -> Optional[str]:
    has_no_prompt = not request.prompt.strip()
    has_no_assets = len(request.reference_images) == 0
    if has_no_prompt and has_no_assets:
        return "Please enter a prompt and add at least one asset."
    if has_no_prompt:
        return "Please enter a prompt."
    if has_no_assets:
        return "At least one reference asset is required."
    return None


def _check_extend(request: GenerationRequest) -> Optional[str]:
    if request.input_video is None:
        return "An input video from a previous generation is required to extend."
    return None


_MODE_CHECKS: dict[GenerationMode, Callable[[GenerationRequest], Optional[str]]] = {
    GenerationMode.TEXT_TO_VIDEO: _check_text,
    GenerationMode.STORY: _check_story,
    GenerationMode.FRAMES_TO_VIDEO: _check_frames,
    GenerationMode.REFERENCES_TO_VIDEO: _check_references,
    GenerationMode.EXTEND_VIDEO: _check_extend,
}


def request_problem(request: GenerationRequest) -> Optional[str]:
    """Return a user-facing reason the request cannot be submitted, or None."""
    problem = _MODE_CHECKS[request.mode](request)
    if problem:
        return problem

    max_refs = MODE_PROFILES[request.mode].max_reference_images
    if max_refs and len(request.reference_images) > max_refs:
        return f"At most {max_refs} reference images are supported."
    return None


def validate_request(request: GenerationRequest) -> None:
    """Raise InvalidRequest if the request breaks the rules of its mode."""
    problem = request_problem(request)
    if problem:
        raise InvalidRequest(problem)
