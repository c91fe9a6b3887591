"""Tests for health, metrics, and request context."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from navgraph.api.dependencies import get_settings
from navgraph.config.models import ObservabilityConfig
from navgraph.config.settings import Settings


class TestHealth:
    def test_health_reports_components(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert {c["name"] for c in data["components"]} == {
            "graph_store",
            "session_store",
            "audit_store",
        }

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client: TestClient) -> None:
        assert client.get("/health").headers["X-Request-ID"]


class TestMetrics:
    def test_metrics_exposed(self, client: TestClient, onboarding: dict) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "navgraph_" in response.text

    def test_metrics_disabled(self, app: FastAPI, client: TestClient) -> None:
        app.dependency_overrides[get_settings] = lambda: Settings(
            observability=ObservabilityConfig(metrics_enabled=False)
        )

        response = client.get("/metrics")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "METRICS_DISABLED"
