"""
Contract tests for health, readiness, metrics and cross-cutting behaviour.

Tests cover:
- /health and /ready responses
- Prometheus exposition on /metrics
- Correlation ID propagation
- Error envelope for unknown routes and unexpected exceptions
"""

import asyncio

import asyncpg
import pytest
from fastapi.testclient import TestClient

from api.src.dependencies import get_contact_service
from api.src.main import create_app


class UnreachablePool:
    """Pool double whose connections fail on acquire."""

    def __init__(self, error: Exception):
        self.error = error

    def acquire(self):
        return self

    async def __aenter__(self):
        raise self.error

    async def __aexit__(self, *exc_info):
        return False

    def get_size(self):
        return 0

    def get_idle_size(self):
        return 0


class TestHealthEndpoints:
    """Tests for /health and /ready."""

    def test_health(self, client, settings):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == settings.app_name
        assert body["version"] == settings.app_version

    def test_ready_without_database(self, client):
        """Test readiness fails while no pool exists."""
        response = client.get("/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        assert body["checks"] == {"database": "unhealthy"}

    @pytest.mark.parametrize("error", [
        asyncpg.InterfaceError("pool is closing"),
        asyncio.TimeoutError(),
        ConnectionRefusedError("connection refused"),
    ])
    def test_ready_when_database_unreachable(self, app, client, error):
        """Test connection-level failures report 503 instead of raising."""
        app.state.db_pool = UnreachablePool(error)

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"database": "unhealthy"}


class TestMetricsEndpoint:
    """Tests for /metrics."""

    def test_metrics_counts_requests_by_route_template(self, client, auth_headers, contact):
        client.get(f"/api/contacts/{contact['id']}", headers=auth_headers)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        text = response.text
        assert "http_requests_total" in text
        assert 'endpoint="/api/contacts/{contact_id}"' in text
        assert 'status="200"' in text

    def test_metrics_label_keeps_router_prefix(self, client, auth_headers):
        client.get("/api/users/current", headers=auth_headers)

        text = client.get("/metrics").text

        assert 'endpoint="/api/users/current"' in text
        assert 'endpoint="/users/current"' not in text

    def test_metrics_record_unhandled_errors(self, app, auth_headers):
        """Test a request that raises is still counted as a 500."""

        class BrokenService:
            async def get(self, user, contact_id):
                raise RuntimeError("boom")

        app.dependency_overrides[get_contact_service] = lambda: BrokenService()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/contacts/1", headers=auth_headers)

        assert response.status_code == 500
        registry = app.state.metrics.registry
        labels = {"method": "GET", "endpoint": "/api/contacts/{contact_id}"}
        assert registry.get_sample_value("http_requests_total", {**labels, "status": "500"}) == 1.0
        assert registry.get_sample_value("http_request_duration_seconds_count", labels) == 1.0

    def test_metrics_disabled(self, settings):
        settings.metrics_enabled = False
        client = TestClient(create_app(settings))

        response = client.get("/metrics")

        assert response.status_code == 404


class TestCrossCutting:
    """Tests for middleware and global error handling."""

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_correlation_id_generated(self, client):
        response = client.get("/health")

        assert response.headers["X-Correlation-ID"]

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"errors": "Not Found"}

    def test_unexpected_error_is_500(self, app, auth_headers):
        """Test an unhandled exception becomes a generic 500 envelope."""

        class BrokenService:
            async def get(self, user, contact_id):
                raise RuntimeError("boom")

        app.dependency_overrides[get_contact_service] = lambda: BrokenService()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/contacts/1", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"errors": "Internal server error"}
