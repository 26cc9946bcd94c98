"""
Mail Proxy API Endpoints

Proxies the Mail.tm API for the browser:
- Domains
- Accounts and tokens
- Messages and raw sources

Mailbox routes take the caller's Mail.tm token as `Authorization: Bearer`.
All routes are rate limited per client address.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from tempbox.clients.mailtm import MailTMClient
from tempbox.core.logging import get_logger
from tempbox.dependencies import (
    check_rate_limit,
    get_inbox_service,
    get_mail_client,
    get_mail_token,
    get_sanitization_service,
)
from tempbox.schemas.common import ErrorResponse
from tempbox.schemas.mail import AccountCredentials, InboxCreated
from tempbox.services.inbox_service import InboxService
from tempbox.services.sanitization_service import SanitizationService

logger = get_logger(__name__)
router = APIRouter(
    dependencies=[Depends(check_rate_limit)],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or rejected mailbox token"},
        429: {"model": ErrorResponse, "description": "Too many requests from this address"},
        502: {"model": ErrorResponse, "description": "Mail.tm unreachable or failing"},
    },
)


# ===================================
# Domains
# ===================================

@router.get(
    "/domains",
    summary="List Mail.tm domains",
)
async def list_domains(
    page: int = Query(default=1, ge=1),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_domains(page)


@router.get(
    "/domains/{domain_id}",
    summary="Get a Mail.tm domain",
)
async def get_domain(
    domain_id: str,
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_domain(domain_id)


# ===================================
# Accounts
# ===================================

@router.post(
    "/inbox",
    response_model=InboxCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a disposable inbox",
    description="""
    Create a mailbox with a random address on the first active public
    Mail.tm domain and return its credentials and bearer token.
    """,
)
async def create_inbox(
    inbox_service: InboxService = Depends(get_inbox_service),
):
    return await inbox_service.create_inbox()


@router.post(
    "/accounts",
    status_code=status.HTTP_201_CREATED,
    summary="Create a Mail.tm account",
)
async def create_account(
    credentials: AccountCredentials,
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    account = await mail_client.create_account(credentials.address, credentials.password)
    logger.info("account_created", address=account.get("address"))
    return account


@router.post(
    "/token",
    summary="Issue a Mail.tm token",
)
async def create_token(
    credentials: AccountCredentials,
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_token(credentials.address, credentials.password)


@router.get(
    "/me",
    summary="Get the authenticated account",
)
async def get_me(
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_me(token)


@router.get(
    "/accounts/{account_id}",
    summary="Get a Mail.tm account",
)
async def get_account(
    account_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_account(account_id, token)


@router.delete(
    "/accounts/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a Mail.tm account",
)
async def delete_account(
    account_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
):
    await mail_client.delete_account(account_id, token)
    return None


# ===================================
# Messages
# ===================================

@router.get(
    "/messages",
    summary="List messages",
)
async def list_messages(
    page: int = Query(default=1, ge=1),
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_messages(token, page)


@router.get(
    "/messages/{message_id}",
    summary="Get a message",
    description="Returns the full message; HTML parts are sanitized.",
)
async def get_message(
    message_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
    sanitizer: SanitizationService = Depends(get_sanitization_service),
) -> Dict[str, Any]:
    message = await mail_client.get_message(message_id, token)
    return sanitizer.sanitize_message(message)


@router.patch(
    "/messages/{message_id}",
    summary="Mark a message as read",
)
async def mark_message_as_read(
    message_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    result = await mail_client.mark_message_as_read(message_id, token)
    return result or {"seen": True}


@router.delete(
    "/messages/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a message",
)
async def delete_message(
    message_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
):
    await mail_client.delete_message(message_id, token)
    return None


@router.get(
    "/sources/{message_id}",
    summary="Get a message's raw source",
)
async def get_message_source(
    message_id: str,
    token: str = Depends(get_mail_token),
    mail_client: MailTMClient = Depends(get_mail_client),
) -> Dict[str, Any]:
    return await mail_client.get_message_source(message_id, token)
