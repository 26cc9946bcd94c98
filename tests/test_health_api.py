"""
Tests for health endpoints and response headers.
"""

from tempbox.clients.gofile import GofileClient

from conftest import NOW, make_record


def test_health_reports_registry_size(app_client, registry):
    registry.add(make_record("a", NOW))

    response = app_client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["registry_size"] == 1
    assert body["components"]["sweeper"] == "idle"
    assert body["components"]["file_host"] == "configured"


def test_health_degraded_without_gofile_token(app_client):
    app_client.app.state.file_host = GofileClient(token="")

    body = app_client.get("/api/v1/health").json()

    assert body["status"] == "degraded"
    assert body["components"]["file_host"] == "unconfigured"


def test_probes(app_client):
    assert app_client.get("/api/v1/readiness").json() == {"status": "ready"}
    assert app_client.get("/api/v1/liveness").json() == {"status": "alive"}


def test_security_headers(app_client):
    response = app_client.get("/")

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_unknown_route(app_client):
    response = app_client.get("/api/v1/nope")

    assert response.status_code == 404
    assert response.json()["error"] == "http_error"
