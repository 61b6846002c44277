"""Centralized dependency injection for FastAPI application.

This module provides factory functions for creating service instances
used by the API routes.
"""

from functools import lru_cache

from fastapi import HTTPException, status

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.services.analysis import DocumentAnalysisOrchestrator
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


@lru_cache(maxsize=1)
def _build_orchestrator() -> DocumentAnalysisOrchestrator:
    return DocumentAnalysisOrchestrator()


def get_analysis_orchestrator() -> DocumentAnalysisOrchestrator:
    """Get the shared analysis orchestrator.

    The orchestrator and its LLM client are built on first use so that the
    application starts without provider credentials.

    Returns:
        DocumentAnalysisOrchestrator: Orchestrator configured from settings

    Raises:
        HTTPException: 503 if the LLM provider is not configured
    """
    try:
        return _build_orchestrator()
    except ConfigurationError as e:
        LOGGER.error("LLM provider is not configured", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Analysis service is not configured: {e}",
        ) from e
