"""
Pydantic Schemas

Request and response models for API validation.
"""

from tempbox.schemas.files import (
    ResourceRecord,
    ResourceCreate,
    ResourceDetail,
    ResourceList,
    ExpiryOption,
)
from tempbox.schemas.cleanup import (
    CleanupResults,
    CleanupResponse,
    CleanupFailure,
)
from tempbox.schemas.mail import (
    AccountCredentials,
    InboxCreated,
)
from tempbox.schemas.common import (
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "ResourceRecord",
    "ResourceCreate",
    "ResourceDetail",
    "ResourceList",
    "ExpiryOption",
    "CleanupResults",
    "CleanupResponse",
    "CleanupFailure",
    "AccountCredentials",
    "InboxCreated",
    "HealthResponse",
    "ErrorResponse",
]
