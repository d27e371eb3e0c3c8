"""Remote job cycle: submit a Veo job, poll it to completion, fetch the video.

Each cycle walks the state machine in veogen.orchestrator.state:

    submitting -> polling -> fetching -> done
         \\           \\           \\
          +-----------+-----------+--> failed

- Poll at a fixed interval (no backoff). The budget is unbounded unless
  PollPolicy sets max_attempts or timeout.
- A CancellationToken stops polling deterministically; the remote job is
  not told to stop and keeps running server-side.
- The first generated video is downloaded and written to disk.

Usage:
    from veogen.pipeline.video_gen import JobCycle

    cycle = JobCycle(adapter, file_mgr)
    result = await cycle.run(submission, run_id="abc", step=1)
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional
from urllib.parse import unquote

from google.genai import types
from pydantic import BaseModel, Field

from veogen.config import GenerationConfig
from veogen.errors import (
    GenerationCancelled,
    GenerationFailed,
    MissingAssetLocator,
    NoAssetsProduced,
    PollingTimedOut,
)
from veogen.orchestrator.state import INITIAL_STATE, JOB_STATES, can_transition, is_terminal
from veogen.schemas.generation import GenerationResult, JobSubmission
from veogen.services.file_manager import FileManager
from veogen.services.veo.base import VideoServiceAdapter

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class PollPolicy(BaseModel):
    """How often and for how long to poll a running job."""

    interval: float = Field(default=10.0, gt=0)
    max_attempts: Optional[int] = Field(default=None, ge=1)
    timeout: Optional[float] = Field(default=None, gt=0)

    @classmethod
    def from_settings(cls, config: GenerationConfig) -> "PollPolicy":
        return cls(
            interval=config.poll_interval,
            max_attempts=config.poll_max_attempts,
            timeout=config.poll_timeout,
        )


class CancellationToken:
    """Lets a caller stop an in-flight generation between remote calls."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise GenerationCancelled("Generation cancelled by caller")

    async def wait(self, seconds: float) -> None:
        """Sleep for ``seconds``, returning early if cancelled."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


class JobCycle:
    """One submit -> poll -> fetch round trip against the video service."""

    def __init__(
        self,
        adapter: VideoServiceAdapter,
        file_manager: FileManager,
        *,
        policy: Optional[PollPolicy] = None,
        token: Optional[CancellationToken] = None,
        sleep: Optional[SleepFn] = None,
        clock: Callable[[], float] = time.monotonic,
        label: str = "job",
    ) -> None:
        self._adapter = adapter
        self._file_manager = file_manager
        self._policy = policy or PollPolicy()
        self._token = token or CancellationToken()
        self._sleep = sleep or self._token.wait
        self._clock = clock
        self._label = label
        self.state = INITIAL_STATE
        self.history = [INITIAL_STATE]

    def _advance(self, target: str) -> None:
        if not can_transition(self.state, target):
            raise RuntimeError(
                f"{self._label}: invalid job transition {self.state} -> {target}"
            )
        logger.debug(f"{self._label}: {self.state} -> {target} ({JOB_STATES[target]})")
        self.state = target
        self.history.append(target)

    async def run(self, submission: JobSubmission, run_id: str, step: int) -> GenerationResult:
        """Run the cycle to completion.

        Args:
            submission: Payload built for this step.
            run_id: Artifact directory of the enclosing generate() call.
            step: 1-based step number, used for the clip filename.

        Returns:
            GenerationResult for the downloaded video.

        Raises:
            GenerationError subclass for any failure; the state is "failed".
        """
        try:
            self._token.raise_if_cancelled()
            operation = await self._adapter.submit(submission)
            self._advance("polling")

            operation = await self._poll_until_done(operation)
            if operation.response is None:
                logger.error(f"{self._label}: operation failed: {operation.error}")
                raise GenerationFailed("No videos generated.", error=operation.error)
            self._advance("fetching")

            result = await self._fetch(operation.response, run_id, step)
            self._advance("done")
            return result
        except BaseException:
            # CancelledError from a cancelled task included
            if not is_terminal(self.state):
                self._advance("failed")
            raise

    async def _poll_until_done(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        policy = self._policy
        started = self._clock()
        attempts = 0

        while not operation.done:
            self._token.raise_if_cancelled()
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise PollingTimedOut(
                    f"{self._label}: operation {operation.name} not done "
                    f"after {attempts} polls"
                )
            wait = policy.interval
            if policy.timeout is not None:
                # Never sleep past the deadline
                wait = min(wait, self._remaining(started, operation))

            await self._sleep(wait)
            self._token.raise_if_cancelled()
            if policy.timeout is not None:
                self._remaining(started, operation)

            operation = await self._adapter.poll(operation)
            attempts += 1
            logger.info(f"{self._label}: ...Generating... (poll {attempts})")

        return operation

    def _remaining(self, started: float, operation: types.GenerateVideosOperation) -> float:
        """Seconds left in the poll budget; raises PollingTimedOut when spent."""
        elapsed = self._clock() - started
        remaining = self._policy.timeout - elapsed
        if remaining <= 0:
            raise PollingTimedOut(
                f"{self._label}: operation {operation.name} not done "
                f"after {elapsed:.0f} seconds"
            )
        return remaining

    async def _fetch(
        self, response: types.GenerateVideosResponse, run_id: str, step: int
    ) -> GenerationResult:
        videos = response.generated_videos
        if not videos:
            raise NoAssetsProduced("No videos were generated.")

        video = videos[0].video
        if video is None or not video.uri:
            raise MissingAssetLocator("Generated video is missing a URI.")

        uri = unquote(video.uri)
        data = await self._adapter.download(uri)
        local_path = self._file_manager.save_clip(run_id, step, data)
        logger.info(f"{self._label}: saved {len(data)} bytes to {local_path}")

        return GenerationResult(local_path=local_path, source_uri=uri, video=video)
