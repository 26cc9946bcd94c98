"""
Dependency Injection

FastAPI dependencies for the expiry registry and sweeper, upstream API
clients, authentication, and rate limiting.

Long-lived objects are built once in the application lifespan and kept on
``app.state``; these dependencies hand them to the routes.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from tempbox.clients.gofile import GofileClient
from tempbox.clients.mailtm import MailTMClient
from tempbox.core.exceptions import RateLimitExceededException, UnauthorizedException
from tempbox.core.metrics import rate_limited_total
from tempbox.core.rate_limiter import RateLimiter
from tempbox.core.security import extract_bearer_token, verify_cron_secret
from tempbox.services.expiry_registry import ExpiryRegistry
from tempbox.services.expiry_sweeper import ExpirySweeper
from tempbox.services.inbox_service import InboxService
from tempbox.services.sanitization_service import SanitizationService


# ===================================
# Application State
# ===================================

def get_registry(request: Request) -> ExpiryRegistry:
    """
    Get the process-wide expiry registry.

    Returns:
        ExpiryRegistry: Registry created at start-up
    """
    return request.app.state.registry


def get_sweeper(request: Request) -> ExpirySweeper:
    """
    Get the expiry sweeper.

    Returns:
        ExpirySweeper: Sweeper created at start-up
    """
    return request.app.state.sweeper


def get_mail_client(request: Request) -> MailTMClient:
    return request.app.state.mail_client


def get_file_host(request: Request) -> GofileClient:
    return request.app.state.file_host


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


# ===================================
# Service Dependencies
# ===================================

def get_sanitization_service() -> SanitizationService:
    """
    Get sanitization service instance.

    Returns:
        SanitizationService: Sanitization service
    """
    return SanitizationService()


def get_inbox_service(
    mail_client: MailTMClient = Depends(get_mail_client),
) -> InboxService:
    """
    Get inbox service instance.

    Args:
        mail_client: Mail.tm client

    Returns:
        InboxService: Inbox service
    """
    return InboxService(mail_client)


# ===================================
# Authentication Dependencies
# ===================================

async def verify_cron_credential(
    authorization: Optional[str] = Header(None),
) -> bool:
    """
    Verify the shared secret guarding cleanup and registry administration.

    Args:
        authorization: Authorization header (Bearer <CRON_SECRET>)

    Returns:
        bool: True if valid

    Raises:
        UnauthorizedException: If the credential is missing or wrong
    """
    if not verify_cron_secret(extract_bearer_token(authorization)):
        raise UnauthorizedException()

    return True


async def get_mail_token(
    authorization: Optional[str] = Header(None),
) -> str:
    """
    Get the caller's Mail.tm bearer token.

    Raises:
        UnauthorizedException: If the header is missing or malformed
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedException("Authorization required")

    return token


# ===================================
# Rate Limiting Dependencies
# ===================================

def client_key(request: Request) -> str:
    """Identify the caller by the first forwarded address, else the peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def check_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> bool:
    """
    Check rate limit for the current request.

    Raises:
        RateLimitExceededException: If rate limit exceeded
    """
    key = client_key(request)

    if not limiter.hit(key):
        rate_limited_total.inc()
        raise RateLimitExceededException(retry_after=limiter.retry_after(key))

    return True
