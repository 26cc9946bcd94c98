"""
Expiry Registry

In-memory bookkeeping of hosted resources and when they become eligible
for cleanup. The registry never evicts on its own: a record stays until it
is removed explicitly, however long ago it expired.
"""

import math
import time
from typing import Dict, Iterable, List, Optional

from tempbox.core.logging import get_logger
from tempbox.schemas.files import ResourceRecord

logger = get_logger(__name__)

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

EXPIRY_OPTIONS = [
    {"label": "15 minutes", "value": 15 * MINUTE_MS, "display": "15m"},
    {"label": "1 hour", "value": HOUR_MS, "display": "1h"},
    {"label": "6 hours", "value": 6 * HOUR_MS, "display": "6h"},
    {"label": "1 day", "value": DAY_MS, "display": "1d"},
    {"label": "3 days", "value": 3 * DAY_MS, "display": "3d"},
    {"label": "1 week", "value": 7 * DAY_MS, "display": "1w"},
]


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class ExpiryRegistry:
    """
    Keyed collection of resource records with expiration instants.

    Adding a record whose id is already present replaces it. The two time
    queries partition the future: ``get_expired`` holds everything due at
    ``now``, ``get_expiring_soon`` only what falls due after ``now`` and
    within the window. Both are evaluated on every call.

    No locking is done here; the sweeper serializes its own access.
    """

    def __init__(self):
        self._records: Dict[str, ResourceRecord] = {}

    def add(self, record: ResourceRecord) -> None:
        self._records[record.id] = record

    def get(self, resource_id: str) -> Optional[ResourceRecord]:
        return self._records.get(resource_id)

    def get_all(self) -> List[ResourceRecord]:
        return list(self._records.values())

    def get_expired(self, now: Optional[int] = None) -> List[ResourceRecord]:
        """
        Get every record whose expiry is at or before ``now``.

        Args:
            now: Reference instant in ms (defaults to the current time)

        Returns:
            list: Expired records, in insertion order
        """
        if now is None:
            now = now_ms()
        return [record for record in self._records.values() if record.expires_at <= now]

    def get_expiring_soon(
        self,
        within_minutes: int = 60,
        now: Optional[int] = None,
    ) -> List[ResourceRecord]:
        """
        Get records that have not expired yet but will within the window.

        Args:
            within_minutes: Window length in minutes
            now: Reference instant in ms (defaults to the current time)

        Returns:
            list: Records with ``now < expires_at <= now + window``
        """
        if now is None:
            now = now_ms()
        threshold = now + within_minutes * MINUTE_MS
        return [
            record
            for record in self._records.values()
            if now < record.expires_at <= threshold
        ]

    def remove(self, resource_id: str) -> bool:
        return self._records.pop(resource_id, None) is not None

    def remove_multiple(self, resource_ids: Iterable[str]) -> None:
        """Remove every listed id; unknown ids are ignored."""
        for resource_id in resource_ids:
            self._records.pop(resource_id, None)

    def clear(self) -> None:
        count = len(self._records)
        self._records.clear()
        logger.info("registry_cleared", dropped=count)

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, resource_id: str) -> bool:
        return resource_id in self._records


# ===================================
# Expiry Helpers
# ===================================

def expiry_timestamp(duration_ms: int, now: Optional[int] = None) -> int:
    """
    Compute an expiration instant ``duration_ms`` after ``now``.

    Args:
        duration_ms: Lifetime in milliseconds
        now: Reference instant in ms (defaults to the current time)

    Returns:
        int: Expiration instant in ms
    """
    if now is None:
        now = now_ms()
    return now + duration_ms


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    Examples:
        0 -> "0 Bytes", 1536 -> "1.5 KB", 1048576 -> "1 MB"
    """
    if size_bytes <= 0:
        return "0 Bytes"

    sizes = ["Bytes", "KB", "MB", "GB", "TB"]
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(sizes) - 1)
    value = round(size_bytes / math.pow(1024, i), 2)

    return f"{value:g} {sizes[i]}"


def format_time_remaining(expires_at: int, now: Optional[int] = None) -> str:
    """
    Format the time left before ``expires_at``.

    Returns "Expired" once the instant has passed, otherwise the two most
    significant units ("2d 3h", "4h 12m") or just minutes ("9m").
    """
    if now is None:
        now = now_ms()

    remaining = expires_at - now
    if remaining <= 0:
        return "Expired"

    minutes = remaining // MINUTE_MS
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    return f"{minutes}m"
