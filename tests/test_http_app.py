"""Tests for the FastAPI front of the HTTP transport"""
import pytest
from fastapi.testclient import TestClient

from brainsait_mcp.http_server import create_http_app
from brainsait_mcp.server import HealthcareServer


@pytest.fixture
def http_client(settings):
    server = HealthcareServer(settings)
    # no lifespan: the MCP session manager is not needed for plain endpoints
    return TestClient(create_http_app(server.mcp_server, settings))


class TestHttpApp:
    """Tests for /health and /"""

    def test_health(self, http_client):
        response = http_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "BrainSAIT-Healthcare"}

    def test_service_info(self, http_client):
        info = http_client.get("/").json()
        assert info["version"] == "1.0.0"
        assert info["protocol"] == "mcp"
        assert info["hipaa_mode"] is True
        assert info["languages"] == ["ar", "en"]
        assert info["endpoints"] == {"health": "/health", "mcp": "/mcp"}

    def test_custom_mcp_path(self, settings):
        server = HealthcareServer(settings)
        app = create_http_app(server.mcp_server, settings, mcp_path="/rpc")
        info = TestClient(app).get("/").json()
        assert info["endpoints"]["mcp"] == "/rpc"
        assert "/rpc" in {route.path for route in app.routes}
