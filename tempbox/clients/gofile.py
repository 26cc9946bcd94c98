"""
Gofile Client

Deletes hosted content through the Gofile API. A call covers a list of
content ids and either succeeds or fails as a whole.
"""

from typing import Any, Dict, Optional, Sequence

import httpx

from tempbox.config import get_settings
from tempbox.core.exceptions import FileHostException
from tempbox.core.logging import get_logger
from tempbox.core.metrics import file_host_requests_total

settings = get_settings()
logger = get_logger(__name__)


class GofileClient:
    """Async wrapper around the Gofile content endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token if token is not None else settings.GOFILE_API_TOKEN
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.GOFILE_BASE_URL,
            timeout=timeout or settings.GOFILE_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.token)

    async def delete_content(self, content_ids: Sequence[str]) -> Dict[str, Any]:
        """
        Delete files or folders from the file host.

        Args:
            content_ids: Gofile content ids

        Returns:
            dict: The ``data`` member of the Gofile response

        Raises:
            FileHostException: On transport errors, HTTP errors, or a
                non-"ok" API status
        """
        if not self.token:
            file_host_requests_total.labels(status="error").inc()
            raise FileHostException("Gofile API token is not configured")

        try:
            response = await self._client.request(
                "DELETE",
                "/contents",
                json={"contentsId": ",".join(content_ids)},
                headers={"Authorization": f"Bearer {self.token}"},
            )
        except httpx.HTTPError as e:
            file_host_requests_total.labels(status="error").inc()
            raise FileHostException(
                message="Gofile request failed",
                detail={"error": str(e)},
            ) from e

        if response.status_code >= 400:
            file_host_requests_total.labels(status="error").inc()
            raise FileHostException(
                message=f"Gofile returned HTTP {response.status_code}",
                detail={"body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            file_host_requests_total.labels(status="error").inc()
            raise FileHostException(
                message="Gofile returned an invalid response",
                detail={"body": response.text[:500]},
            ) from e

        if payload.get("status") != "ok":
            file_host_requests_total.labels(status="error").inc()
            raise FileHostException(
                message=f"Gofile rejected deletion: {payload.get('status')}",
                detail=payload.get("data"),
            )

        file_host_requests_total.labels(status="ok").inc()
        logger.debug("gofile_contents_deleted", count=len(content_ids))

        return payload.get("data") or {}

    async def close(self):
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()
