"""Google Generative AI client wrapper using the google-genai SDK.

Provides a cached client for either the Gemini API (API key) or Vertex AI
(Application Default Credentials), depending on settings.google.use_vertex_ai.

Usage:
    from veogen.services.genai_client import get_genai_client

    client = get_genai_client()
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from google import genai

from veogen.config import GoogleConfig, settings

# Load .env for GOOGLE_APPLICATION_CREDENTIALS (ADC) and GEMINI_API_KEY
load_dotenv(Path.cwd() / ".env")

# Environment variables the Gemini tooling conventionally reads the key from
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

# Per-(mode, location) client cache
_clients: dict[str, genai.Client] = {}


def resolve_api_key(google: Optional[GoogleConfig] = None) -> Optional[str]:
    """Return the configured API key, falling back to the conventional env vars."""
    google = google or settings.google
    if google.api_key is not None and google.api_key.get_secret_value():
        return google.api_key.get_secret_value()
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def get_genai_client(google: Optional[GoogleConfig] = None) -> genai.Client:
    """Get or create a client for the configured backend.

    Clients are cached per backend/location so repeated calls are cheap.

    Args:
        google: Google configuration section. Defaults to settings.google.

    Returns:
        genai.Client: Configured client instance
    """
    google = google or settings.google

    if google.use_vertex_ai:
        cache_key = f"vertex:{google.location}"
        if cache_key not in _clients:
            _clients[cache_key] = genai.Client(
                vertexai=True,
                project=google.project_id,
                location=google.location,
            )
        return _clients[cache_key]

    cache_key = "gemini"
    if cache_key not in _clients:
        _clients[cache_key] = genai.Client(api_key=resolve_api_key(google))
    return _clients[cache_key]
