"""
API v1 Router

Aggregates all API v1 endpoints.
"""

from fastapi import APIRouter

from tempbox.api.v1 import cleanup, files, health, mail

api_router = APIRouter()

api_router.include_router(
    mail.router,
    prefix="/mail",
    tags=["mail"],
)

api_router.include_router(
    files.router,
    prefix="/files",
    tags=["files"],
)

api_router.include_router(
    cleanup.router,
    prefix="/cleanup",
    tags=["cleanup"],
)

api_router.include_router(
    health.router,
    tags=["health"],
)
