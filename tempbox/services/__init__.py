"""
Services Module

Business logic layer for the application.
"""

from tempbox.services.expiry_registry import ExpiryRegistry
from tempbox.services.expiry_sweeper import ExpirySweeper
from tempbox.services.inbox_service import InboxService
from tempbox.services.sanitization_service import SanitizationService

__all__ = [
    "ExpiryRegistry",
    "ExpirySweeper",
    "InboxService",
    "SanitizationService",
]
