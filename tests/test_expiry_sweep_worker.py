"""
Tests for the scheduled sweep worker.
"""

import asyncio

import pytest
from prometheus_client import REGISTRY

from tempbox.core.exceptions import CleanupFailedException, SweepInProgressException
from tempbox.services.expiry_sweeper import ExpirySweeper
from tempbox.workers.expiry_sweep import ExpirySweepWorker

from conftest import make_record


class StubSweeper:
    def __init__(self, error=None):
        self.error = error
        self.triggers = []

    async def sweep(self, now=None, trigger="manual"):
        self.triggers.append(trigger)
        if self.error is not None:
            raise self.error


@pytest.mark.asyncio
async def test_run_once_sweeps_with_scheduled_trigger(registry, file_host, sweeper):
    registry.add(make_record("old", 1_000, created_at=0))

    await ExpirySweepWorker(sweeper, interval=60).run_once()

    assert file_host.calls == [["old"]]
    assert registry.size() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [SweepInProgressException(), CleanupFailedException(detail="boom"), RuntimeError("boom")],
)
async def test_run_once_absorbs_failures(error):
    stub = StubSweeper(error)

    await ExpirySweepWorker(stub, interval=60).run_once()

    assert stub.triggers == ["scheduled"]


@pytest.mark.asyncio
async def test_start_and_stop():
    stub = StubSweeper()
    worker = ExpirySweepWorker(stub, interval=3600)

    worker.start()
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    await asyncio.wait_for(worker.stop(), timeout=1)

    assert stub.triggers == ["scheduled"]
    assert worker.running is False


def sweep_runs(outcome):
    value = REGISTRY.get_sample_value(
        "tempbox_sweep_runs_total",
        {"trigger": "scheduled", "outcome": outcome},
    )
    return value or 0.0


class BrokenRegistry:
    def get_expired(self, now=None):
        raise RuntimeError("registry unavailable")

    def size(self):
        return 0


@pytest.mark.asyncio
async def test_hard_failure_is_counted_once(file_host, sleeper):
    sweeper = ExpirySweeper(BrokenRegistry(), file_host, batch_size=5, batch_delay=0, sleep=sleeper)
    before = {outcome: sweep_runs(outcome) for outcome in ("failed", "error")}

    await ExpirySweepWorker(sweeper, interval=60).run_once()

    assert sweep_runs("failed") - before["failed"] == 1
    assert sweep_runs("error") - before["error"] == 0


@pytest.mark.asyncio
async def test_unrecorded_error_is_counted_by_worker():
    before = sweep_runs("error")

    await ExpirySweepWorker(StubSweeper(RuntimeError("boom")), interval=60).run_once()

    assert sweep_runs("error") - before == 1
