"""
Shared fixtures.

Settings are read once at import time, so the environment is prepared
before anything from ``tempbox`` is imported.
"""

import os

os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("GOFILE_API_TOKEN", "test-gofile-token")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("CLEANUP_SCHEDULE_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_REQUESTS", "1000")

from typing import List, Optional, Sequence, Set

import pytest
from fastapi.testclient import TestClient

from tempbox.core.exceptions import FileHostException
from tempbox.schemas.files import ResourceRecord
from tempbox.services.expiry_registry import ExpiryRegistry
from tempbox.services.expiry_sweeper import ExpirySweeper

NOW = 1_700_000_000_000
CRON_HEADERS = {"Authorization": "Bearer test-cron-secret"}


def make_record(
    resource_id: str,
    expires_at: int,
    created_at: Optional[int] = None,
    **extra,
) -> ResourceRecord:
    if created_at is None:
        created_at = expires_at - 60_000
    return ResourceRecord(
        id=resource_id,
        created_at=created_at,
        expires_at=expires_at,
        name=extra.pop("name", f"{resource_id}.bin"),
        size=extra.pop("size", 1024),
        **extra,
    )


class FakeFileHost:
    """Records delete calls; fails the calls whose 1-based index is listed."""

    def __init__(self, fail_calls: Optional[Set[int]] = None):
        self.fail_calls = fail_calls or set()
        self.calls: List[List[str]] = []

    async def delete_content(self, content_ids: Sequence[str]):
        self.calls.append(list(content_ids))
        if len(self.calls) in self.fail_calls:
            raise FileHostException(f"upstream refused call {len(self.calls)}")
        return {}


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


@pytest.fixture
def registry():
    return ExpiryRegistry()


@pytest.fixture
def file_host():
    return FakeFileHost()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def sweeper(registry, file_host, sleeper):
    return ExpirySweeper(registry, file_host, batch_size=5, batch_delay=1.0, sleep=sleeper)


@pytest.fixture
def app_client(registry, sweeper):
    """TestClient whose app uses the test registry and fake file host."""
    from tempbox.main import app

    with TestClient(app) as client:
        app.state.registry = registry
        app.state.sweeper = sweeper
        app.state.rate_limiter.reset()
        yield client
