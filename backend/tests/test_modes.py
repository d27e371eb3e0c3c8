"""Tests for per-mode configuration locks and submission rules."""

import pytest

from fakes import image
from veogen.errors import InvalidRequest
from veogen.schemas.generation import (
    AspectRatio,
    GenerationMode,
    GenerationRequest,
    Resolution,
    VeoModel,
)
from veogen.schemas.modes import (
    MODE_PROFILES,
    apply_mode_profile,
    request_problem,
    validate_request,
)


def test_every_mode_has_a_profile():
    assert set(MODE_PROFILES) == set(GenerationMode)


def test_extend_is_not_directly_selectable():
    selectable = {mode for mode, profile in MODE_PROFILES.items() if profile.selectable}
    assert GenerationMode.EXTEND_VIDEO not in selectable
    assert GenerationMode.TEXT_TO_VIDEO in selectable


def test_references_mode_locks_model_aspect_and_resolution():
    request = GenerationRequest(
        mode=GenerationMode.REFERENCES_TO_VIDEO,
        model=VeoModel.VEO_FAST,
        aspect_ratio=AspectRatio.PORTRAIT,
        resolution=Resolution.P1080,
    )

    locked = apply_mode_profile(request)

    assert locked.model == VeoModel.VEO
    assert locked.aspect_ratio == AspectRatio.LANDSCAPE
    assert locked.resolution == Resolution.P720
    # Original request is untouched
    assert request.model == VeoModel.VEO_FAST


def test_story_mode_locks_model_and_resolution_but_not_aspect():
    request = GenerationRequest(
        mode=GenerationMode.STORY,
        aspect_ratio=AspectRatio.PORTRAIT,
        resolution=Resolution.P4K,
    )

    locked = apply_mode_profile(request)

    assert locked.model == VeoModel.VEO
    assert locked.resolution == Resolution.P720
    assert locked.aspect_ratio == AspectRatio.PORTRAIT


def test_extend_mode_locks_resolution_only():
    request = GenerationRequest(
        mode=GenerationMode.EXTEND_VIDEO,
        model=VeoModel.VEO,
        resolution=Resolution.P1080,
    )

    locked = apply_mode_profile(request)

    assert locked.resolution == Resolution.P720
    assert locked.model == VeoModel.VEO


def test_unlocked_mode_returns_same_request():
    request = GenerationRequest(prompt="x", resolution=Resolution.P4K)

    assert apply_mode_profile(request) is request


@pytest.mark.parametrize("request_, problem", [
    (GenerationRequest(prompt="   "), "Please enter a prompt."),
    (
        GenerationRequest(mode=GenerationMode.STORY),
        "Please describe every scene in the story.",
    ),
    (
        GenerationRequest(mode=GenerationMode.STORY, story_prompts=("open", " ")),
        "Please describe every scene in the story.",
    ),
    (
        GenerationRequest(mode=GenerationMode.FRAMES_TO_VIDEO, end_frame=image()),
        "A start frame is required.",
    ),
    (
        GenerationRequest(mode=GenerationMode.REFERENCES_TO_VIDEO),
        "Please enter a prompt and add at least one asset.",
    ),
    (
        GenerationRequest(
            mode=GenerationMode.REFERENCES_TO_VIDEO, reference_images=(image(),)
        ),
        "Please enter a prompt.",
    ),
    (
        GenerationRequest(mode=GenerationMode.REFERENCES_TO_VIDEO, prompt="Heist"),
        "At least one reference asset is required.",
    ),
    (
        GenerationRequest(mode=GenerationMode.EXTEND_VIDEO),
        "An input video from a previous generation is required to extend.",
    ),
])
def test_request_problem_messages(request_, problem):
    assert request_problem(request_) == problem


def test_too_many_reference_images():
    request = GenerationRequest(
        mode=GenerationMode.REFERENCES_TO_VIDEO,
        prompt="Heist",
        reference_images=tuple(image(f"ref {i}") for i in range(4)),
    )

    assert request_problem(request) == "At most 3 reference images are supported."


def test_too_many_story_scenes():
    request = GenerationRequest(
        mode=GenerationMode.STORY,
        story_prompts=tuple(f"scene {i}" for i in range(21)),
    )

    assert request_problem(request) == "A story can have at most 20 scenes."


def test_frames_without_prompt_is_valid():
    request = GenerationRequest(mode=GenerationMode.FRAMES_TO_VIDEO, start_frame=image())

    assert request_problem(request) is None
    validate_request(request)


def test_validate_request_raises_invalid_request():
    with pytest.raises(InvalidRequest, match="Please enter a prompt."):
        validate_request(GenerationRequest())
