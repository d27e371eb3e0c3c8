"""Factory for the configured video service adapter.

Builds a GenaiVideoAdapter for either the Gemini API (API key, which also
authorizes asset downloads) or Vertex AI (ADC, downloads without a key).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from veogen.services.veo.base import AssetCredentials, VideoServiceAdapter

if TYPE_CHECKING:
    from veogen.config import Settings

logger = logging.getLogger(__name__)


def get_video_adapter(config: Optional["Settings"] = None) -> VideoServiceAdapter:
    """Return a video service adapter configured from settings.

    Args:
        config: Settings instance. Defaults to the global settings.

    Returns:
        Configured VideoServiceAdapter ready for use.
    """
    from veogen.services.genai_client import get_genai_client, resolve_api_key
    from veogen.services.veo.genai_adapter import GenaiVideoAdapter

    if config is None:
        from veogen.config import settings as config

    google = config.google
    if google.use_vertex_ai:
        credentials = AssetCredentials()
    else:
        credentials = AssetCredentials(resolve_api_key(google))

    logger.debug(
        "Building GenaiVideoAdapter (vertex=%s, credentials=%r)",
        google.use_vertex_ai,
        credentials,
    )
    return GenaiVideoAdapter(
        client=get_genai_client(google),
        credentials=credentials,
        fetch_timeout=config.generation.fetch_timeout,
    )
