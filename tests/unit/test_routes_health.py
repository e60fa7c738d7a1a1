"""
Unit tests for api/routes/health.py — health and status endpoints.
"""
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from api.main import app
from config.settings import ConversionConfig


@pytest.fixture
def client():
    return TestClient(app)


class TestHealthCheck:
    """Test GET /health."""

    def test_health_returns_200(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200

    def test_health_response_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert isinstance(data["timestamp"], float)

    def test_security_headers(self, client):
        resp = client.get("/health")
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"


class TestSystemStatus:
    """Test GET /api/system/status."""

    def test_disabled_by_default(self, client):
        data = client.get("/api/system/status").json()
        rtf = data["conversion"]["rtf"]
        assert rtf["enabled"] is False
        assert rtf["tool_configured"] is False
        assert rtf["tool_available"] is False
        assert rtf["tool_path"] is None
        assert "uptime_seconds" in data

    def test_tool_on_path(self, client, make_converter):
        tool = make_converter("exit 0")
        config = ConversionConfig(enabled=True, tool=tool, timeout_seconds=120)
        with patch("api.routes.health.conversion_config", config):
            rtf = client.get("/api/system/status").json()["conversion"]["rtf"]

        assert rtf["enabled"] is True
        assert rtf["tool_configured"] is True
        assert rtf["tool_available"] is True
        assert rtf["tool_path"] == tool
        assert rtf["timeout_seconds"] == 120

    def test_tool_missing(self, client, tmp_path):
        config = ConversionConfig(enabled=True, tool=str(tmp_path / "missing"))
        with patch("api.routes.health.conversion_config", config):
            rtf = client.get("/api/system/status").json()["conversion"]["rtf"]

        assert rtf["tool_configured"] is True
        assert rtf["tool_available"] is False

    def test_directories_reported(self, client):
        from config.settings import settings

        dirs = client.get("/api/system/status").json()["directories"]
        assert dirs["temp"] == str(settings.temp_dir)
        assert dirs["content"] == str(settings.content_dir)
