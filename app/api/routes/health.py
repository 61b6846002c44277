"""Health check API endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str = Field(
        default="healthy",
        description="Service health status",
        examples=["healthy", "degraded"],
    )
    version: str = Field(..., description="Running application version", examples=["0.1.0"])
    service: str = Field(..., description="Service name", examples=["Insightful Reader"])
    llm_provider: str = Field(..., description="Configured text-generation provider")
    llm_configured: bool = Field(..., description="Whether the provider API key is set")


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and the LLM provider is configured",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    if settings.llm_provider == "openrouter":
        llm_configured = bool(settings.openrouter_api_key.strip())
    else:
        llm_configured = bool(settings.gemini_api_key.strip())

    if not llm_configured:
        LOGGER.warning(f"LLM provider '{settings.llm_provider}' has no API key configured")

    return HealthCheckResponse(
        status="healthy" if llm_configured else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        llm_provider=settings.llm_provider,
        llm_configured=llm_configured,
    )
