"""Job submission builder: GenerationRequest -> JobSubmission.

Pure transformation, no I/O. Branches on generation mode and on whether the
step extends an existing video:

- An extension (extend_video mode, or a prior-video override from a story
  chain) omits aspect_ratio, which the service infers from the source video,
  and does not append reference labels to the prompt.
- Input shaping takes the first matching branch:
  1. prior-video override  -> ``video``
  2. frames_to_video       -> ``image`` + ``config.last_frame``
  3. references / story    -> ``config.reference_images`` (assets, then style)
  4. extend_video          -> ``video`` from the request, required

Usage:
    from veogen.pipeline.submission import build_submission

    submission = build_submission(request)
    submission = build_submission(request, "next scene", previous.video)
"""

from typing import Optional

from google.genai import types

from veogen.errors import MissingExtensionSource
from veogen.schemas.generation import (
    GenerationMode,
    GenerationRequest,
    ImageInput,
    JobSubmission,
)


def _reference_descriptions(reference_images: tuple[ImageInput, ...]) -> str:
    """Format labelled references as ``(Reference N: label)`` in input order.

    N is the 1-based position in the full list, so unlabelled references
    still take up an index.
    """
    return " ".join(
        f"(Reference {idx}: {img.description})"
        for idx, img in enumerate(reference_images, start=1)
        if img.description
    )


def effective_prompt(
    request: GenerationRequest,
    prompt_override: Optional[str] = None,
    is_extension: bool = False,
) -> str:
    """Resolve the prompt text sent with a submission."""
    prompt = prompt_override or request.prompt

    if not is_extension and request.reference_images:
        descriptions = _reference_descriptions(request.reference_images)
        if descriptions:
            prompt = f"{prompt} {descriptions}" if prompt else descriptions

    return prompt


def _reference_inputs(
    request: GenerationRequest,
) -> list[types.VideoGenerationReferenceImage]:
    refs = [
        types.VideoGenerationReferenceImage(
            image=img.to_genai_image(),
            reference_type=types.VideoGenerationReferenceType.ASSET,
        )
        for img in request.reference_images
    ]
    if request.style_image is not None:
        refs.append(
            types.VideoGenerationReferenceImage(
                image=request.style_image.to_genai_image(),
                reference_type=types.VideoGenerationReferenceType.STYLE,
            )
        )
    return refs


def build_submission(
    request: GenerationRequest,
    prompt_override: Optional[str] = None,
    video_override: Optional[types.Video] = None,
) -> JobSubmission:
    """Map one request step to the payload for ``generate_videos``.

    Args:
        request: The caller's request.
        prompt_override: Replaces ``request.prompt`` (story steps).
        video_override: Video to extend instead of building inputs from the
            request (story steps after the first).

    Returns:
        JobSubmission ready to hand to a VideoServiceAdapter.

    Raises:
        MissingExtensionSource: extend_video without ``request.input_video``.
    """
    mode = request.mode
    is_extension = mode == GenerationMode.EXTEND_VIDEO or video_override is not None

    config_fields: dict = {
        "number_of_videos": 1,
        "resolution": request.resolution.value,
    }
    # The extended source determines the aspect ratio
    if not is_extension:
        config_fields["aspect_ratio"] = request.aspect_ratio.value

    image = None
    video = None

    if video_override is not None:
        video = video_override
    elif mode == GenerationMode.FRAMES_TO_VIDEO:
        if request.start_frame is not None:
            image = request.start_frame.to_genai_image()
        end_frame = request.start_frame if request.is_looping else request.end_frame
        if end_frame is not None:
            config_fields["last_frame"] = end_frame.to_genai_image()
    elif mode == GenerationMode.REFERENCES_TO_VIDEO or (
        mode == GenerationMode.STORY and request.reference_images
    ):
        if not is_extension:
            refs = _reference_inputs(request)
            if refs:
                config_fields["reference_images"] = refs
    elif mode == GenerationMode.EXTEND_VIDEO:
        if request.input_video is None:
            raise MissingExtensionSource(
                "An input video object is required to extend a video."
            )
        video = request.input_video

    prompt = effective_prompt(request, prompt_override, is_extension)

    return JobSubmission(
        model=request.model.value,
        prompt=prompt or None,
        image=image,
        video=video,
        config=types.GenerateVideosConfig(**config_fields),
    )
