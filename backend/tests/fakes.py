"""In-memory stand-ins for the remote video service and the clock.

FakeVideoAdapter records every submit/poll/download so tests can assert on
the exact remote traffic a generation causes. FakeClock replaces both the
sleep function and the monotonic clock so polling runs instantly.
"""

from typing import Callable, Optional

from google.genai import types

from veogen.schemas.generation import ImageInput, JobSubmission
from veogen.services.veo.base import VideoServiceAdapter

VIDEO_CONTENT = b"\x00\x00\x00\x18ftypmp42-fake-video"


def video_uri(name: str) -> str:
    """Percent-encoded download URI, the way the Gemini API returns it."""
    file_id = name.rsplit("/", 1)[-1]
    return f"https://generativelanguage.googleapis.com/v1beta/files/{file_id}%3Adownload?alt=media"


def finished_operation(
    name: str, videos: Optional[list[types.GeneratedVideo]] = None
) -> types.GenerateVideosOperation:
    if videos is None:
        videos = [
            types.GeneratedVideo(
                video=types.Video(uri=video_uri(name), mime_type="video/mp4")
            )
        ]
    return types.GenerateVideosOperation(
        name=name,
        done=True,
        response=types.GenerateVideosResponse(generated_videos=videos),
    )


def image(label: str = "", data: bytes = b"fake-png-bytes") -> ImageInput:
    return ImageInput(data=data, mime_type="image/png", description=label)


class FakeVideoAdapter(VideoServiceAdapter):
    """Spy adapter that scripts how many polls each job needs."""

    def __init__(
        self,
        *,
        pending_polls: int = 0,
        done_on_submit: bool = False,
        finish: Callable[[str], types.GenerateVideosOperation] = finished_operation,
        content: bytes = VIDEO_CONTENT,
        submit_error: Optional[Exception] = None,
        download_error: Optional[Exception] = None,
    ):
        self.pending_polls = pending_polls
        self.done_on_submit = done_on_submit
        self.finish = finish
        self.content = content
        self.submit_error = submit_error
        self.download_error = download_error

        self.submissions: list[JobSubmission] = []
        self.polls: list[str] = []
        self.downloads: list[str] = []
        self.closed = False
        self._remaining: dict[str, int] = {}

    @property
    def call_count(self) -> int:
        return len(self.submissions) + len(self.polls) + len(self.downloads)

    async def submit(self, submission: JobSubmission) -> types.GenerateVideosOperation:
        self.submissions.append(submission)
        if self.submit_error is not None:
            raise self.submit_error

        name = f"operations/op-{len(self.submissions)}"
        if self.done_on_submit:
            return self.finish(name)
        self._remaining[name] = self.pending_polls
        return types.GenerateVideosOperation(name=name, done=False)

    async def poll(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        self.polls.append(operation.name)
        if self._remaining[operation.name] > 0:
            self._remaining[operation.name] -= 1
            return types.GenerateVideosOperation(name=operation.name, done=False)
        return self.finish(operation.name)

    async def download(self, uri: str) -> bytes:
        self.downloads.append(uri)
        if self.download_error is not None:
            raise self.download_error
        return self.content

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Controllable time source: sleeping advances ``now`` instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
