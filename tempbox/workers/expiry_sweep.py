"""
Expiry Sweep Worker

Background task that periodically sweeps expired resources.

The registry lives in the web process, so the worker runs inside the
application lifespan rather than as a separate process. Enable it with
CLEANUP_SCHEDULE_ENABLED=true.
"""

import asyncio
from typing import Optional

from tempbox.config import get_settings
from tempbox.core.exceptions import CleanupFailedException, SweepInProgressException
from tempbox.core.logging import get_logger
from tempbox.core.metrics import sweep_runs_total
from tempbox.services.expiry_sweeper import ExpirySweeper

settings = get_settings()
logger = get_logger(__name__)


class ExpirySweepWorker:
    """
    Periodic trigger for the expiry sweeper.

    Runs a sweep, then waits for the configured interval, until stopped.
    Failures are logged and the loop carries on.
    """

    def __init__(self, sweeper: ExpirySweeper, interval: Optional[float] = None):
        self.sweeper = sweeper
        self.interval = settings.cleanup_interval_seconds if interval is None else interval
        self.running = False
        self._task: Optional[asyncio.Task] = None
        self._wakeup = asyncio.Event()

    def start(self) -> asyncio.Task:
        """Schedule the worker loop on the running event loop."""
        if self._task is None or self._task.done():
            self.running = True
            self._wakeup.clear()
            self._task = asyncio.create_task(self._loop(), name="expiry-sweep-worker")
            logger.info("sweep_worker_started", interval=self.interval)
        return self._task

    async def stop(self):
        """Stop the worker and wait for the loop to exit."""
        logger.info("sweep_worker_stopping")
        self.running = False
        self._wakeup.set()

        if self._task is not None:
            await self._task
            self._task = None

        logger.info("sweep_worker_stopped")

    async def run_once(self):
        """Run a single scheduled sweep, absorbing its failures."""
        try:
            await self.sweeper.sweep(trigger="scheduled")
        except SweepInProgressException:
            logger.info("scheduled_sweep_skipped", reason="in_progress")
        except CleanupFailedException as e:
            # Already counted by the sweeper
            logger.error("scheduled_sweep_failed", error=e.detail)
        except Exception as e:
            logger.error("scheduled_sweep_error", error=str(e), exc_info=True)
            sweep_runs_total.labels(trigger="scheduled", outcome="error").inc()

    async def _loop(self):
        while self.running:
            await self.run_once()

            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue
