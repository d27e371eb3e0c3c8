"""Pydantic schemas for generation requests, job submissions and results.

GenerationRequest is what the caller (form, CLI) hands to the orchestrator.
JobSubmission is the remote-API-shaped payload derived from one request step.
GenerationResult is what a finished generate() call returns.

Remote handles (the produced video, the input video to extend) are the SDK's
own ``google.genai.types.Video`` objects so they can be passed straight back
into a later submission without re-uploading media.
"""

import base64
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field


class GenerationMode(str, Enum):
    """How a request turns into remote inputs."""

    TEXT_TO_VIDEO = "text_to_video"
    FRAMES_TO_VIDEO = "frames_to_video"
    REFERENCES_TO_VIDEO = "references_to_video"
    EXTEND_VIDEO = "extend_video"
    STORY = "story"


class VeoModel(str, Enum):
    VEO_FAST = "veo-3.1-fast-generate-preview"
    VEO = "veo-3.1-generate-preview"


class AspectRatio(str, Enum):
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class Resolution(str, Enum):
    P720 = "720p"
    P1080 = "1080p"
    P4K = "4k"


class ImageInput(BaseModel):
    """An image supplied as a frame, reference or style input.

    ``description`` is the optional label a user attached to a reference
    image; it is folded into the prompt for non-extension submissions.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "image/png"
    description: str = ""
    filename: Optional[str] = None

    @classmethod
    def from_path(cls, path: str | Path, description: str = "") -> "ImageInput":
        """Read an image file, guessing its MIME type from the extension."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type is None or not mime_type.startswith("image/"):
            raise ValueError(f"Not a recognised image file: {path.name}")
        return cls(
            data=path.read_bytes(),
            mime_type=mime_type,
            description=description,
            filename=path.name,
        )

    @classmethod
    def from_base64(
        cls, encoded: str, mime_type: str, description: str = ""
    ) -> "ImageInput":
        """Build from a base64 payload, with or without a ``data:`` URL prefix."""
        if encoded.startswith("data:"):
            encoded = encoded.split(",", 1)[1]
        return cls(
            data=base64.b64decode(encoded),
            mime_type=mime_type,
            description=description,
        )

    def to_genai_image(self) -> types.Image:
        return types.Image(image_bytes=self.data, mime_type=self.mime_type)


class GenerationRequest(BaseModel):
    """A single user submission.

    Which optional fields matter depends on ``mode``:
    - frames_to_video: start_frame, end_frame, is_looping
    - references_to_video / story: reference_images, style_image
    - extend_video: input_video
    - story: story_prompts (one remote job per entry, chained)
    """

    model_config = ConfigDict(frozen=True)

    mode: GenerationMode = GenerationMode.TEXT_TO_VIDEO
    prompt: str = ""
    story_prompts: tuple[str, ...] = ()
    model: VeoModel = VeoModel.VEO_FAST
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    resolution: Resolution = Resolution.P720
    start_frame: Optional[ImageInput] = None
    end_frame: Optional[ImageInput] = None
    is_looping: bool = False
    reference_images: tuple[ImageInput, ...] = ()
    style_image: Optional[ImageInput] = None
    input_video: Optional[types.Video] = None

    @classmethod
    def extending(
        cls,
        result: "GenerationResult",
        prompt: str = "",
        model: VeoModel = VeoModel.VEO_FAST,
    ) -> "GenerationRequest":
        """Build an extend-video request continuing a previous result."""
        return cls(
            mode=GenerationMode.EXTEND_VIDEO,
            prompt=prompt,
            model=model,
            resolution=Resolution.P720,
            input_video=result.video,
        )


class JobSubmission(BaseModel):
    """Payload for one ``generate_videos`` call. Never persisted."""

    model_config = ConfigDict(frozen=True)

    model: str
    prompt: Optional[str] = None
    image: Optional[types.Image] = None
    video: Optional[types.Video] = None
    config: types.GenerateVideosConfig = Field(
        default_factory=lambda: types.GenerateVideosConfig(number_of_videos=1)
    )

    def to_request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``client.aio.models.generate_videos``."""
        kwargs: dict[str, Any] = {"model": self.model, "config": self.config}
        if self.prompt:
            kwargs["prompt"] = self.prompt
        if self.image is not None:
            kwargs["image"] = self.image
        if self.video is not None:
            kwargs["video"] = self.video
        return kwargs


class GenerationResult(BaseModel):
    """Output of a finished generation.

    ``video`` is the remote handle; it can be used as the input video of a
    later extension without downloading and re-uploading the clip.
    """

    model_config = ConfigDict(frozen=True)

    local_path: Path
    source_uri: str
    video: types.Video
