"""Generation orchestrator: turns one request into one GenerationResult.

Coordinates the remote job cycles for a request with:
- Single-step generation for every mode except a non-empty story
- Story sequences folded step by step, each step extending the video the
  previous step produced
- Strictly sequential steps; any failure aborts the whole call
- Optional progress callback for CLI/UI status display
"""

import logging
import time
import uuid
from typing import Awaitable, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from veogen.errors import ChainBroken
from veogen.pipeline.submission import build_submission
from veogen.pipeline.video_gen import CancellationToken, JobCycle, PollPolicy, SleepFn
from veogen.schemas.generation import GenerationMode, GenerationRequest, GenerationResult
from veogen.services.file_manager import FileManager
from veogen.services.veo.base import VideoServiceAdapter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class StoryStep(BaseModel):
    """One remote job cycle within a generate() call."""

    model_config = ConfigDict(frozen=True)

    index: int
    total: int
    # None means "use the request's own prompt"
    prompt: Optional[str] = None


def plan_steps(request: GenerationRequest) -> list[StoryStep]:
    """Return the ordered steps needed to fulfil ``request``.

    A story request with scene prompts runs one step per prompt; everything
    else, including a story without prompts, is a single step.
    """
    if request.mode == GenerationMode.STORY and request.story_prompts:
        total = len(request.story_prompts)
        return [
            StoryStep(index=i, total=total, prompt=prompt)
            for i, prompt in enumerate(request.story_prompts, start=1)
        ]
    return [StoryStep(index=1, total=1)]


async def _fold_steps(
    steps: Iterable[StoryStep],
    step_fn: Callable[[Optional[GenerationResult], StoryStep], Awaitable[GenerationResult]],
) -> Optional[GenerationResult]:
    """Sequential async reduce: each step receives the previous step's result."""
    result: Optional[GenerationResult] = None
    for step in steps:
        result = await step_fn(result, step)
    return result


class VideoGenerator:
    """Runs generation requests against a video service adapter.

    The adapter carries the remote client and download credentials, so the
    generator itself never touches process-wide configuration.
    """

    def __init__(
        self,
        adapter: VideoServiceAdapter,
        file_manager: Optional[FileManager] = None,
        *,
        poll_policy: Optional[PollPolicy] = None,
        sleep: Optional[SleepFn] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.adapter = adapter
        self.file_manager = file_manager or FileManager()
        self.poll_policy = poll_policy or PollPolicy()
        self._sleep = sleep
        self._clock = clock

    async def generate(
        self,
        request: GenerationRequest,
        *,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """Generate a video for ``request``.

        Args:
            request: The caller's request.
            token: Optional cancellation token; cancelling stops polling.
            progress_callback: Optional callback receiving coarse step messages.

        Returns:
            The single step's result, or the final step's result of a story.

        Raises:
            GenerationError subclass; no partial results are returned.
        """
        token = token or CancellationToken()
        run_id = uuid.uuid4().hex
        steps = plan_steps(request)

        if len(steps) > 1:
            logger.info(f"Run {run_id}: starting story sequence with {len(steps)} parts")

        async def step_fn(
            previous: Optional[GenerationResult], step: StoryStep
        ) -> GenerationResult:
            return await self.run_step(
                request, step, previous,
                run_id=run_id, token=token, progress_callback=progress_callback,
            )

        result = await _fold_steps(steps, step_fn)
        if result is None:
            raise ChainBroken("Generation finished without producing a video.")

        logger.info(f"Run {run_id}: complete, output {result.local_path}")
        return result

    async def run_step(
        self,
        request: GenerationRequest,
        step: StoryStep,
        previous: Optional[GenerationResult],
        *,
        run_id: str,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """Build and run the job cycle for one step.

        Steps after the first extend ``previous.video``.

        Raises:
            ChainBroken: A later step has no predecessor result to extend.
        """
        video_override = None
        if step.index > 1:
            if previous is None or previous.video is None:
                raise ChainBroken(
                    f"Step {step.index}/{step.total}: previous step failed to produce a result."
                )
            video_override = previous.video

        submission = build_submission(request, step.prompt, video_override)

        message = f"Step {step.index}/{step.total}: generating..."
        logger.info(f"Run {run_id}: {message} prompt={step.prompt or request.prompt!r}")
        if progress_callback:
            progress_callback(message)

        cycle = JobCycle(
            self.adapter,
            self.file_manager,
            policy=self.poll_policy,
            token=token,
            sleep=self._sleep,
            clock=self._clock,
            label=f"Run {run_id} step {step.index}/{step.total}",
        )
        result = await cycle.run(submission, run_id=run_id, step=step.index)

        logger.info(f"Run {run_id}: step {step.index}/{step.total} complete")
        return result
