"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from ...config import get_settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    model: str
    upstream_configured: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status."""
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        model=settings.upstream_model,
        upstream_configured=bool(settings.deepseek_api_key),
    )
