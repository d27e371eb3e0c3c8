"""google-genai adapter for Veo video generation.

Submits jobs with ``client.aio.models.generate_videos``, refreshes them with
``client.aio.operations.get`` and downloads finished clips over httpx with
the API key passed as a ``key`` query parameter.
"""

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types

from veogen.errors import AssetFetchFailed, StatusQueryFailed, SubmissionRejected
from veogen.schemas.generation import JobSubmission
from veogen.services.veo.base import AssetCredentials, VideoServiceAdapter

logger = logging.getLogger(__name__)


def to_http_url(uri: str) -> str:
    """Map a ``gs://`` URI to its public storage URL; leave others unchanged."""
    if uri.startswith("gs://"):
        return uri.replace("gs://", "https://storage.googleapis.com/", 1)
    return uri


class GenaiVideoAdapter(VideoServiceAdapter):
    """Video service adapter backed by the google-genai SDK."""

    def __init__(
        self,
        client: genai.Client,
        credentials: AssetCredentials,
        http_client: Optional[httpx.AsyncClient] = None,
        fetch_timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._http = http_client
        self._owns_http = http_client is None
        self._fetch_timeout = fetch_timeout

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                follow_redirects=True,
                timeout=httpx.Timeout(self._fetch_timeout, connect=30.0),
            )
            self._owns_http = True
        return self._http

    async def submit(self, submission: JobSubmission) -> types.GenerateVideosOperation:
        logger.info(
            "Submitting video generation request: model=%s prompt=%r extension=%s",
            submission.model,
            submission.prompt,
            submission.video is not None,
        )
        try:
            operation = await self._client.aio.models.generate_videos(
                **submission.to_request_kwargs()
            )
        except errors.APIError as e:
            raise SubmissionRejected(
                f"Video generation request rejected: {e}", status_code=e.code
            ) from e
        logger.info(f"Video generation operation started: {operation.name}")
        return operation

    async def poll(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        try:
            return await self._client.aio.operations.get(operation)
        except errors.APIError as e:
            raise StatusQueryFailed(
                f"Status query for {operation.name} failed: {e}"
            ) from e

    async def download(self, uri: str) -> bytes:
        url = to_http_url(uri)
        # Merge into the existing query; Gemini file URIs carry alt=media
        request_url = httpx.URL(url).copy_merge_params(self._credentials.query_params())
        try:
            response = await self.http.get(request_url)
        except httpx.HTTPError as e:
            raise AssetFetchFailed(None, str(e)) from e

        if response.is_error:
            raise AssetFetchFailed(response.status_code, response.reason_phrase)

        logger.info(f"Downloaded {len(response.content)} bytes from {url}")
        return response.content

    async def close(self) -> None:
        if self._owns_http and self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None
