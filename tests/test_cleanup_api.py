"""
Tests for the cleanup trigger endpoint.
"""

import pytest

from tempbox.core.exceptions import SweepInProgressException

from conftest import CRON_HEADERS, NOW, make_record

CLEANUP_URL = "/api/v1/cleanup"


def add_expired(registry, count):
    for i in range(count):
        registry.add(make_record(f"exp{i}", NOW - 1))


class TestAuthorization:

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": "Bearer wrong-secret"},
            {"Authorization": "test-cron-secret"},
            {"Authorization": "Basic test-cron-secret"},
        ],
    )
    def test_rejects_bad_credentials(self, app_client, registry, file_host, headers):
        add_expired(registry, 3)

        response = app_client.get(CLEANUP_URL, params={"now": NOW}, headers=headers)

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert registry.size() == 3
        assert file_host.calls == []


class TestSweep:

    def test_noop(self, app_client, registry, file_host):
        registry.add(make_record("fresh", NOW + 60_000))

        response = app_client.get(CLEANUP_URL, params={"now": NOW}, headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "No expired files to clean up",
            "cleaned": 0,
        }
        assert file_host.calls == []

    def test_post_is_accepted(self, app_client, registry, file_host):
        add_expired(registry, 2)

        response = app_client.post(CLEANUP_URL, params={"now": NOW}, headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json()["cleaned"] == 2
        assert registry.size() == 0

    def test_partial_failure_is_reported(self, app_client, registry, file_host, sleeper):
        add_expired(registry, 12)
        file_host.fail_calls = {2}

        response = app_client.get(CLEANUP_URL, params={"now": NOW}, headers=CRON_HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Cleanup completed: 7 deleted, 5 failed"
        assert body["cleaned"] == 7
        assert body["results"]["attempted"] == 12
        assert body["results"]["successful"] == 7
        assert body["results"]["failed"] == 5
        assert body["results"]["errors"][0].startswith("Batch 5-10: ")
        assert sleeper.delays == [1.0, 1.0]
        assert registry.size() == 5

    def test_now_defaults_to_current_time(self, app_client, registry, file_host):
        registry.add(make_record("ancient", 1_000, created_at=0))

        response = app_client.get(CLEANUP_URL, headers=CRON_HEADERS)

        assert response.json()["cleaned"] == 1
        assert file_host.calls == [["ancient"]]

    def test_negative_now_is_rejected(self, app_client):
        response = app_client.get(CLEANUP_URL, params={"now": -5}, headers=CRON_HEADERS)

        assert response.status_code == 422


class TestFailures:

    def test_hard_failure_returns_500(self, app_client, registry, monkeypatch):
        def broken(now=None):
            raise RuntimeError("registry exploded")

        monkeypatch.setattr(registry, "get_expired", broken)

        response = app_client.get(CLEANUP_URL, params={"now": NOW}, headers=CRON_HEADERS)

        assert response.status_code == 500
        assert response.json() == {"error": "Cleanup failed", "details": "registry exploded"}

    def test_sweep_in_progress_returns_409(self, app_client, sweeper, monkeypatch):
        async def busy(now=None, trigger="manual"):
            raise SweepInProgressException()

        monkeypatch.setattr(sweeper, "sweep", busy)

        response = app_client.get(CLEANUP_URL, headers=CRON_HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "sweep_in_progress"
        assert response.json()["message"] == "Cleanup already in progress"
