"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from api import app
from shared.config import get_settings


client = TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == get_settings().app_version

    def test_health_response_structure(self):
        """Health response should have correct structure."""
        data = client.get("/api/health").json()
        assert set(data.keys()) == {"status", "timestamp", "uptime", "environment", "version"}
        assert data["uptime"] >= 0

    def test_health_needs_no_auth(self):
        response = client.get("/api/health", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 200
