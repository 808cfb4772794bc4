"""Health check endpoint.

GET /v1/healthcheck - static availability envelope.
"""

from fastapi import APIRouter

from blog.schemas import HealthResponse, SystemInfo
from blog.settings import get_settings

router = APIRouter()


@router.get("/healthcheck", response_model=HealthResponse)
async def healthcheck() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="available",
        system_info=SystemInfo(
            environment=settings.environment,
            version=settings.app_version,
        ),
    )
