"""
Expiry Sweeper

Reconciles the expiry registry against the file host: finds expired
resources, deletes them in small paced batches, and drops the ids of every
batch the host accepted. Ids from a failed batch stay in the registry and
are picked up again by the next sweep.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from tempbox.config import get_settings
from tempbox.core.exceptions import CleanupFailedException, SweepInProgressException
from tempbox.core.logging import get_logger
from tempbox.core.metrics import (
    record_sweep,
    registry_resources,
    sweep_batch_failures,
    sweep_resources_deleted,
)
from tempbox.schemas.cleanup import CleanupResponse, CleanupResults
from tempbox.services.expiry_registry import ExpiryRegistry

settings = get_settings()
logger = get_logger(__name__)


class FileHost(Protocol):
    """Anything that can delete a batch of content ids, all or nothing."""

    async def delete_content(self, content_ids: Sequence[str]): ...


class ExpirySweeper:
    """
    Batch deleter for expired resources.

    Only one sweep runs at a time per sweeper; a second request made while
    one is in flight raises ``SweepInProgressException`` without touching
    the registry or the file host.
    """

    def __init__(
        self,
        registry: ExpiryRegistry,
        file_host: FileHost,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            registry: Registry to reconcile
            file_host: External deletion service
            batch_size: Ids per external call (default from settings)
            batch_delay: Seconds to pause between batches (default from settings)
            sleep: Coroutine used for the pause
        """
        self.registry = registry
        self.file_host = file_host
        self.batch_size = settings.CLEANUP_BATCH_SIZE if batch_size is None else batch_size
        self.batch_delay = settings.cleanup_batch_delay_seconds if batch_delay is None else batch_delay
        self._sleep = sleep
        self._lock = asyncio.Lock()

        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def sweep(self, now: Optional[int] = None, trigger: str = "manual") -> CleanupResponse:
        """
        Run one sweep.

        Args:
            now: Reference instant in ms (defaults to the current time)
            trigger: Label for metrics and logs (manual, scheduled)

        Returns:
            CleanupResponse: No-op or completed summary

        Raises:
            SweepInProgressException: Another sweep holds the guard
            CleanupFailedException: Failure outside per-batch handling
        """
        if self._lock.locked():
            logger.warning("sweep_rejected_in_progress", trigger=trigger)
            record_sweep(trigger, "skipped")
            raise SweepInProgressException()

        async with self._lock:
            start_time = time.time()
            try:
                response = await self._run(now)
            except Exception as e:
                logger.error("sweep_failed", trigger=trigger, error=str(e), exc_info=True)
                record_sweep(trigger, "failed", time.time() - start_time)
                raise CleanupFailedException(detail=str(e)) from e
            finally:
                registry_resources.set(self.registry.size())

            duration = time.time() - start_time
            record_sweep(trigger, "noop" if response.results is None else "completed", duration)

            results = response.results
            logger.info(
                "sweep_finished",
                trigger=trigger,
                attempted=results.attempted if results else 0,
                successful=results.successful if results else 0,
                failed=results.failed if results else 0,
                duration=round(duration, 3),
            )
            return response

    async def _run(self, now: Optional[int]) -> CleanupResponse:
        expired = self.registry.get_expired(now)

        if not expired:
            return CleanupResponse(
                success=True,
                message="No expired files to clean up",
                cleaned=0,
            )

        resource_ids = [record.id for record in expired]
        results = CleanupResults(attempted=len(resource_ids))

        logger.info("sweep_started", expired=len(resource_ids), batch_size=self.batch_size)

        for start in range(0, len(resource_ids), self.batch_size):
            batch = resource_ids[start:start + self.batch_size]
            await self._delete_batch(batch, start, results)

            if start + self.batch_size < len(resource_ids):
                await self._sleep(self.batch_delay)

        return CleanupResponse(
            success=True,
            message=f"Cleanup completed: {results.successful} deleted, {results.failed} failed",
            cleaned=results.successful,
            results=results,
        )

    async def _delete_batch(self, batch: List[str], start: int, results: CleanupResults):
        batch_range = f"{start}-{start + len(batch)}"

        try:
            await self.file_host.delete_content(batch)
        except Exception as e:
            results.failed += len(batch)
            results.errors.append(f"Batch {batch_range}: {e}")
            sweep_batch_failures.inc()
            logger.error("sweep_batch_failed", batch_range=batch_range, error=str(e))
            return

        results.successful += len(batch)
        self.registry.remove_multiple(batch)
        sweep_resources_deleted.inc(len(batch))
        logger.debug("sweep_batch_deleted", batch_range=batch_range, deleted=len(batch))
