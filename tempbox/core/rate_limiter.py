"""
Rate Limiter

In-memory fixed-window request counter keyed by client address.
"""

import math
import time
from typing import Callable, Dict, Optional, Tuple


class RateLimiter:
    """
    Fixed-window rate limiter.

    Each key gets ``limit`` hits per ``window_ms``. The window starts at the
    first hit and resets once it has elapsed.
    """

    def __init__(
        self,
        limit: int = 8,
        window_ms: int = 1000,
        clock: Optional[Callable[[], float]] = None,
    ):
        if limit < 1:
            raise ValueError("limit must be positive")
        if window_ms < 1:
            raise ValueError("window_ms must be positive")

        self.limit = limit
        self.window_ms = window_ms
        self._clock = clock or (lambda: time.time() * 1000)
        # key -> (count, reset_at_ms)
        self._windows: Dict[str, Tuple[int, float]] = {}

    def hit(self, key: str) -> bool:
        """
        Count a request for ``key``.

        Returns:
            bool: True if the request is within the limit
        """
        now = self._clock()
        self._prune(now)

        count, reset_at = self._windows.get(key, (0, 0.0))
        if now > reset_at:
            self._windows[key] = (1, now + self.window_ms)
            return True

        if count >= self.limit:
            return False

        self._windows[key] = (count + 1, reset_at)
        return True

    def retry_after(self, key: str) -> int:
        """Seconds until ``key``'s window resets, rounded up."""
        _, reset_at = self._windows.get(key, (0, 0.0))
        remaining_ms = max(0.0, reset_at - self._clock())
        return max(1, math.ceil(remaining_ms / 1000))

    def reset(self):
        """Forget all windows."""
        self._windows.clear()

    def _prune(self, now: float):
        # Only sweep once the table has grown; most calls touch a handful of keys
        if len(self._windows) < 1024:
            return
        stale = [key for key, (_, reset_at) in self._windows.items() if now > reset_at]
        for key in stale:
            del self._windows[key]
