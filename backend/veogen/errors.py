"""Exceptions raised while building, submitting, polling and fetching generations.

Every exception here is terminal for the current ``generate`` call. Nothing
is retried automatically; remote jobs that were already submitted are left
running server-side.
"""

from typing import Any, Optional


class GenerationError(Exception):
    """Base class for failures that abort a generation."""


class InvalidRequest(GenerationError):
    """The request does not satisfy the rules of its generation mode."""


class MissingExtensionSource(GenerationError):
    """Extend-video was requested without a previously generated video."""


class SubmissionRejected(GenerationError):
    """The remote submission endpoint refused the job."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StatusQueryFailed(GenerationError):
    """A status query for a submitted job failed."""


class GenerationFailed(GenerationError):
    """The remote job finished without a usable response."""

    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.error = error


class NoAssetsProduced(GenerationError):
    """The finished job reported zero generated videos."""


class MissingAssetLocator(GenerationError):
    """The generated video descriptor has no URI to download from."""


class AssetFetchFailed(GenerationError):
    """Downloading the generated video failed."""

    def __init__(self, status_code: Optional[int], reason: str = ""):
        if status_code is None:
            message = f"Failed to fetch video: {reason}"
        else:
            message = f"Failed to fetch video: {status_code} {reason}".rstrip()
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ChainBroken(GenerationError):
    """A story step ran without a result from the step before it."""


class PollingTimedOut(GenerationError):
    """The configured polling budget ran out before the job finished."""


class GenerationCancelled(GenerationError):
    """The caller cancelled the generation while it was in flight."""
