"""
Custom Exceptions

Application-specific exceptions with proper error codes and messages.
"""

from typing import Optional, Any


class TempBoxException(Exception):
    """
    Base exception for all TempBox errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        detail: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        super().__init__(self.message)


class UnauthorizedException(TempBoxException):
    """
    Raised when a request lacks a valid credential.
    """

    def __init__(self, message: str = "Unauthorized", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="unauthorized",
            detail=detail,
        )


class ResourceNotFoundException(TempBoxException):
    """
    Raised when a tracked resource is not in the registry.
    """

    def __init__(self, resource_id: str, detail: Optional[Any] = None):
        super().__init__(
            message=f"Resource not found: {resource_id}",
            status_code=404,
            error_code="resource_not_found",
            detail=detail,
        )


class SweepInProgressException(TempBoxException):
    """
    Raised when a sweep is requested while another one is running.
    """

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(
            message="Cleanup already in progress",
            status_code=409,
            error_code="sweep_in_progress",
            detail=detail,
        )


class RateLimitExceededException(TempBoxException):
    """
    Raised when rate limit is exceeded.
    """

    def __init__(self, retry_after: int = 1, detail: Optional[Any] = None):
        self.retry_after = retry_after
        super().__init__(
            message="Too many requests. Please wait before trying again.",
            status_code=429,
            error_code="rate_limit_exceeded",
            detail={"retry_after": retry_after, **(detail or {})},
        )


class MailApiException(TempBoxException):
    """
    Raised when a Mail.tm API call fails.

    ``error_type`` is one of: network, api, validation, rate_limit, unknown.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        error_type: str = "unknown",
        detail: Optional[Any] = None,
    ):
        self.error_type = error_type
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=f"mail_{error_type}_error",
            detail=detail,
        )


class FileHostException(TempBoxException):
    """
    Raised when the file host rejects or fails a deletion.
    """

    def __init__(self, message: str = "File host request failed", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="file_host_error",
            detail=detail,
        )


class CleanupFailedException(TempBoxException):
    """
    Raised when a sweep fails outside per-batch handling.
    """

    def __init__(self, message: str = "Cleanup failed", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="cleanup_failed",
            detail=detail,
        )


class SanitizationException(TempBoxException):
    """
    Raised when HTML sanitization fails.
    """

    def __init__(self, message: str = "HTML sanitization failed", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="sanitization_error",
            detail=detail,
        )
