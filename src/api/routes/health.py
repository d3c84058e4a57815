"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core import config

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if the data backend is not configured.
    """
    backend_configured = bool(config.BACKEND_URL)
    timestamp = datetime.now(timezone.utc).isoformat()

    if backend_configured:
        return HealthResponse(
            status="healthy",
            version=config.API_VERSION,
            backend_configured=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=config.API_VERSION,
                backend_configured=False,
                timestamp=timestamp,
                error="BACKEND_URL not configured",
            ).model_dump(),
        )
