"""Abstract base class for remote video generation services.

Defines the async interface the job cycle drives: submit a payload, refresh
a long-running operation, download a finished asset. Also defines the
credential capability used for authenticated downloads.
"""

from abc import ABC, abstractmethod
from typing import Optional

from google.genai import types

from veogen.schemas.generation import JobSubmission


class AssetCredentials:
    """Credential capability for downloading generated assets.

    Holds the API key explicitly instead of reading it from the environment
    at download time, so the orchestrator can be built with any key (or
    none, for Vertex AI / public URIs).
    """

    def __init__(self, api_key: Optional[str] = None) -> None:
        self._api_key = api_key

    def query_params(self) -> dict[str, str]:
        """Query parameters that authorize a download request."""
        if not self._api_key:
            return {}
        return {"key": self._api_key}

    def __repr__(self) -> str:
        return f"AssetCredentials(api_key={'***' if self._api_key else None})"


class VideoServiceAdapter(ABC):
    """Abstract base class for video generation service adapters.

    The job cycle interacts through three methods:
      submit()   - send a JobSubmission -> operation handle
      poll()     - refresh the operation handle
      download() - fetch the bytes behind a generated video URI
    """

    @abstractmethod
    async def submit(self, submission: JobSubmission) -> types.GenerateVideosOperation:
        """Start a remote generation job.

        Raises:
            SubmissionRejected: The service refused the payload.
        """
        ...

    @abstractmethod
    async def poll(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        """Return a refreshed copy of ``operation``.

        Raises:
            StatusQueryFailed: The status request itself failed.
        """
        ...

    @abstractmethod
    async def download(self, uri: str) -> bytes:
        """Download a generated asset.

        Args:
            uri: Decoded asset location.

        Raises:
            AssetFetchFailed: Transport error or non-success status.
        """
        ...

    async def close(self) -> None:
        """Release network resources. Safe to call more than once."""
