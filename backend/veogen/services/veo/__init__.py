"""Remote video generation service abstraction.

Usage:
    from veogen.services.veo import get_video_adapter

    adapter = get_video_adapter()
    operation = await adapter.submit(submission)
"""

from veogen.services.veo.base import AssetCredentials, VideoServiceAdapter
from veogen.services.veo.registry import get_video_adapter

__all__ = ["AssetCredentials", "VideoServiceAdapter", "get_video_adapter"]
