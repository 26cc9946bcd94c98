"""
Health Check API Endpoints

Provides health and readiness endpoints for:
- Kubernetes health checks
- Load balancer health checks
- Monitoring systems
"""

from fastapi import APIRouter, Depends, status

from tempbox import __version__
from tempbox.clients.gofile import GofileClient
from tempbox.config import get_settings
from tempbox.dependencies import get_file_host, get_registry, get_sweeper
from tempbox.schemas.common import HealthResponse
from tempbox.services.expiry_registry import ExpiryRegistry
from tempbox.services.expiry_sweeper import ExpirySweeper

settings = get_settings()
router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="""
    Health check including the expiry components.

    Reports `degraded` when no Gofile token is configured, since sweeps
    cannot delete anything without one.
    """,
)
async def health_check(
    registry: ExpiryRegistry = Depends(get_registry),
    sweeper: ExpirySweeper = Depends(get_sweeper),
    file_host: GofileClient = Depends(get_file_host),
):
    """
    Report component status.

    Returns:
        HealthResponse: Health status of all components
    """
    file_host_ready = file_host.is_configured

    return HealthResponse(
        status="healthy" if file_host_ready else "degraded",
        version=__version__,
        environment=settings.APP_ENV,
        components={
            "api": "healthy",
            "registry": "healthy",
            "sweeper": "running" if sweeper.in_progress else "idle",
            "file_host": "configured" if file_host_ready else "unconfigured",
        },
        registry_size=registry.size(),
    )


@router.get(
    "/readiness",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
)
async def readiness_check():
    """
    Check if application is ready to serve requests.

    Returns:
        dict: Readiness status
    """
    return {"status": "ready"}


@router.get(
    "/liveness",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def liveness_check():
    """
    Check if application is alive.

    Returns:
        dict: Liveness status
    """
    return {"status": "alive"}
