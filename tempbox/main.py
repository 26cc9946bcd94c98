"""
FastAPI Application Entry Point

FastAPI application with:
- CORS middleware
- Security headers
- Error handling
- Metrics collection
- Structured logging
- In-process expiry registry, sweeper and optional sweep schedule
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse, HTMLResponse
from fastapi.encoders import jsonable_encoder
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from tempbox import __version__
from tempbox.api.v1.router import api_router
from tempbox.clients.gofile import GofileClient
from tempbox.clients.mailtm import MailTMClient
from tempbox.config import get_settings
from tempbox.core.exceptions import (
    TempBoxException,
    RateLimitExceededException,
    UnauthorizedException,
)
from tempbox.core.logging import setup_logging, get_logger
from tempbox.core.metrics import active_requests, record_request
from tempbox.core.rate_limiter import RateLimiter
from tempbox.services.expiry_registry import ExpiryRegistry
from tempbox.services.expiry_sweeper import ExpirySweeper
from tempbox.workers.expiry_sweep import ExpirySweepWorker

setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Builds the process-wide objects (registry, sweeper, API clients, rate
    limiter) on start-up and releases them on shutdown. The registry is
    memory-only: it starts empty on every boot.
    """
    logger.info("Starting TempBox application", app_env=settings.APP_ENV)

    app.state.registry = ExpiryRegistry()
    app.state.mail_client = MailTMClient()
    app.state.file_host = GofileClient()
    app.state.sweeper = ExpirySweeper(app.state.registry, app.state.file_host)
    app.state.rate_limiter = RateLimiter(
        limit=settings.RATE_LIMIT_REQUESTS,
        window_ms=settings.RATE_LIMIT_WINDOW_MS,
    )

    if not app.state.file_host.is_configured:
        logger.warning("GOFILE_API_TOKEN is not set; sweeps will report every batch as failed")

    worker = None
    if settings.CLEANUP_SCHEDULE_ENABLED:
        worker = ExpirySweepWorker(app.state.sweeper)
        worker.start()

    yield

    logger.info("Shutting down TempBox application")

    try:
        if worker is not None:
            await worker.stop()

        await app.state.mail_client.close()
        await app.state.file_host.close()
        logger.info("HTTP clients closed")

    except Exception as e:
        logger.error("shutdown_error", error=str(e), exc_info=True)


app = FastAPI(
    title="TempBox API",
    description="Disposable email front end with expiring file cleanup",
    version=__version__,
    docs_url="/docs" if settings.APP_ENV == "development" else None,
    redoc_url="/redoc" if settings.APP_ENV == "development" else None,
    lifespan=lifespan,
)


# ===================================
# Middleware Configuration
# ===================================

if settings.ENABLE_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    logger.info("cors_enabled", origins=settings.CORS_ORIGINS)

app.add_middleware(GZipMiddleware, minimum_size=1000)

if settings.is_production and settings.APP_DOMAIN:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=[settings.APP_DOMAIN, f"*.{settings.APP_DOMAIN}"],
    )


# ===================================
# Request/Response Middleware
# ===================================

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """
    Add security headers to all responses.
    """
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    if settings.is_production:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    if settings.CSP_ENABLED:
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "img-src 'self' data: https:; "
            "style-src 'self' 'unsafe-inline'; "
            "connect-src 'self'; "
            "frame-ancestors 'none';"
        )

    return response


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """
    Collect Prometheus metrics for all requests.
    """
    method = request.method
    path = request.url.path

    active_requests.inc()
    start_time = time.time()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration = time.time() - start_time

        record_request(method, path, status_code, duration)
        active_requests.dec()

    return response


# ===================================
# Exception Handlers
# ===================================

@app.exception_handler(TempBoxException)
async def tempbox_exception_handler(request: Request, exc: TempBoxException):
    """
    Handle custom TempBox exceptions.
    """
    logger.warning(
        "request_failed",
        error_code=exc.error_code,
        reason=exc.message,
        path=request.url.path,
        method=request.method,
    )

    headers = {}
    if isinstance(exc, RateLimitExceededException):
        headers["Retry-After"] = str(exc.retry_after)
    elif isinstance(exc, UnauthorizedException):
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "detail": jsonable_encoder(exc.detail),
        },
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle HTTP exceptions.
    """
    logger.warning(
        "http_error",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "http_error",
            "message": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.
    """
    logger.warning(
        "request_validation_failed",
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Invalid request data",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.
    """
    logger.error(
        "unexpected_error",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    # Don't expose internal errors in production
    message = "Internal server error" if settings.is_production else str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": message,
        },
    )


# ===================================
# Routes
# ===================================

app.include_router(api_router, prefix="/api/v1")

if settings.ENABLE_METRICS:
    app.mount("/metrics", make_asgi_app())
    logger.info("Prometheus metrics enabled at /metrics")


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def root():
    """
    Serve a minimal landing page.
    """
    return HTMLResponse(
        content="""
        <!DOCTYPE html>
        <html>
        <head><title>TempBox</title></head>
        <body>
            <h1>TempBox API</h1>
            <p>API is running. Mail proxy routes live under /api/v1/mail.</p>
        </body>
        </html>
        """
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tempbox.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.is_development,
        log_config=None,  # Use our custom logging
    )
