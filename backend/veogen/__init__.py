"""veogen - Veo video generation orchestrator.

This module provides startup validation so that the CLI (or any other caller)
can fail fast with setup instructions before a generation is submitted.
Call validate_credentials() during application startup.
"""

import logging

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def validate_credentials() -> None:
    """Validate that the remote generation service can be authenticated.

    Gemini API mode needs an API key (settings, GEMINI_API_KEY or
    GOOGLE_API_KEY). Vertex AI mode needs a project id; the credentials
    themselves come from Application Default Credentials.

    Raises:
        RuntimeError: If the required credential settings are missing.
    """
    from veogen.config import settings
    from veogen.services.genai_client import resolve_api_key

    google = settings.google
    if google.use_vertex_ai:
        if not google.project_id:
            raise RuntimeError(
                "Vertex AI mode requires a Google Cloud project id.\n"
                "Set VEOGEN_GOOGLE__PROJECT_ID or google.project_id in config.yaml,\n"
                "and authenticate with: gcloud auth application-default login"
            )
        logger.info(f"Vertex AI credentials configured for project {google.project_id}")
        return

    if not resolve_api_key(google):
        raise RuntimeError(
            "No API key found for the Gemini API.\n"
            "Set one of: VEOGEN_GOOGLE__API_KEY, GEMINI_API_KEY, GOOGLE_API_KEY\n"
            "Keys can be created at https://aistudio.google.com/apikey"
        )
    logger.info("Gemini API key configured")
