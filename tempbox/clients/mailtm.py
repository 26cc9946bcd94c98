"""
Mail.tm Client

Thin async wrapper around the Mail.tm REST API. Mailbox tokens are passed
per call, so one client instance is shared safely across requests.
"""

from typing import Any, Dict, Optional

import httpx

from tempbox.config import get_settings
from tempbox.core.exceptions import MailApiException
from tempbox.core.logging import get_logger
from tempbox.core.metrics import record_mail_api_call, record_mail_api_error

settings = get_settings()
logger = get_logger(__name__)

# status -> (message, error type)
STATUS_ERRORS = {
    400: ("Bad request - check your input", "validation"),
    401: ("Unauthorized - invalid token", "api"),
    404: ("Resource not found", "api"),
    405: ("Method not allowed", "api"),
    418: ("Server temporarily unavailable", "api"),
    422: ("Invalid input data", "validation"),
    429: ("Rate limit exceeded - please wait", "rate_limit"),
}


class MailTMClient:
    """Async Mail.tm API client."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.MAILTM_BASE_URL,
            timeout=timeout or settings.MAILTM_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json", "Accept": "application/ld+json"},
            transport=transport,
        )

    # ===================================
    # Domains
    # ===================================

    async def get_domains(self, page: int = 1) -> Dict[str, Any]:
        return await self._request("get_domains", "GET", "/domains", params={"page": page})

    async def get_domain(self, domain_id: str) -> Dict[str, Any]:
        return await self._request("get_domain", "GET", f"/domains/{domain_id}")

    # ===================================
    # Accounts
    # ===================================

    async def create_account(self, address: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "create_account",
            "POST",
            "/accounts",
            json={"address": address, "password": password},
        )

    async def get_token(self, address: str, password: str) -> Dict[str, Any]:
        """
        Issue a bearer token for a mailbox.

        Returns:
            dict: ``{"id": <account id>, "token": <jwt>}``
        """
        return await self._request(
            "get_token",
            "POST",
            "/token",
            json={"address": address, "password": password},
        )

    async def get_account(self, account_id: str, token: str) -> Dict[str, Any]:
        return await self._request("get_account", "GET", f"/accounts/{account_id}", token=token)

    async def get_me(self, token: str) -> Dict[str, Any]:
        return await self._request("get_me", "GET", "/me", token=token)

    async def delete_account(self, account_id: str, token: str) -> None:
        await self._request("delete_account", "DELETE", f"/accounts/{account_id}", token=token)

    # ===================================
    # Messages
    # ===================================

    async def get_messages(self, token: str, page: int = 1) -> Dict[str, Any]:
        return await self._request("get_messages", "GET", "/messages", token=token, params={"page": page})

    async def get_message(self, message_id: str, token: str) -> Dict[str, Any]:
        return await self._request("get_message", "GET", f"/messages/{message_id}", token=token)

    async def delete_message(self, message_id: str, token: str) -> None:
        await self._request("delete_message", "DELETE", f"/messages/{message_id}", token=token)

    async def mark_message_as_read(self, message_id: str, token: str) -> Dict[str, Any]:
        return await self._request(
            "mark_message_as_read",
            "PATCH",
            f"/messages/{message_id}",
            token=token,
            json={"seen": True},
            headers={"Content-Type": "application/merge-patch+json"},
        )

    async def get_message_source(self, message_id: str, token: str) -> Dict[str, Any]:
        return await self._request("get_message_source", "GET", f"/sources/{message_id}", token=token)

    async def close(self):
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    # ===================================
    # Internals
    # ===================================

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> Any:
        request_headers = dict(headers or {})
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        record_mail_api_call(operation)

        try:
            response = await self._client.request(method, path, headers=request_headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("mailtm_request_failed", operation=operation, error=str(e))
            record_mail_api_error(operation, "network")
            raise MailApiException(
                message="Network error - check your connection",
                status_code=502,
                error_type="network",
                detail={"error": str(e)},
            ) from e

        if response.status_code >= 400:
            error = self._handle_error(response)
            logger.warning(
                "mailtm_error_response",
                operation=operation,
                status_code=response.status_code,
                reason=error.message,
            )
            record_mail_api_error(operation, error.error_type)
            raise error

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            record_mail_api_error(operation, "unknown")
            raise MailApiException(
                message="Invalid response from Mail.tm",
                status_code=502,
                error_type="unknown",
                detail={"body": response.text[:500]},
            ) from e

    @staticmethod
    def _handle_error(response: httpx.Response) -> MailApiException:
        status = response.status_code

        if status in STATUS_ERRORS:
            message, error_type = STATUS_ERRORS[status]
            return MailApiException(message=message, status_code=status, error_type=error_type)

        try:
            body = response.json()
        except ValueError:
            body = None

        upstream_message = None
        if isinstance(body, dict):
            upstream_message = body.get("message") or body.get("detail") or body.get("hydra:description")

        return MailApiException(
            message=upstream_message or "API error occurred",
            status_code=status if status < 500 else 502,
            error_type="api",
            detail={"upstream_status": status},
        )
