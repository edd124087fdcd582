"""Tests for the application shell.

This test suite covers:
- Root and health endpoints
- API documentation endpoints
- Middleware (CORS, request logging headers, unexpected errors)
"""

from datetime import datetime
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from referral_registry import __version__
from referral_registry.adapters.storage import InMemoryReferralAdapter
from referral_registry.api.dependencies import get_referral_service, get_storage_adapter
from referral_registry.api.main import app, create_app
from referral_registry.domain.services import ReferralService
from referral_registry.infrastructure.config_manager import ServerConfig


@pytest.fixture
def storage():
    return InMemoryReferralAdapter()


@pytest.fixture
def client(storage):
    """Create a test client with a fresh registry."""
    app.dependency_overrides[get_storage_adapter] = lambda: storage

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


class TestRootEndpoint:
    """Test the root endpoint."""

    def test_root_endpoint_returns_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == __version__
        assert data["docs"] == "/api-docs"
        assert data["health"] == "/api/health"


class TestHealthEndpoint:
    """Test the health check endpoint."""

    def test_health_endpoint_returns_200(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["referrals"] == {"storage": "memory", "count": 0}

    def test_health_endpoint_timestamp_format(self, client):
        response = client.get("/api/health")

        timestamp = datetime.fromisoformat(response.json()["timestamp"].replace("Z", "+00:00"))
        assert isinstance(timestamp, datetime)

    def test_health_reports_referral_count(self, client):
        client.post("/api/referrals", json={})
        client.post("/api/referrals", json={})

        response = client.get("/api/health")

        assert response.json()["referrals"]["count"] == 2


class TestApiDocs:
    """Test the documentation endpoints."""

    def test_swagger_ui_is_served(self, client):
        response = client.get("/api-docs")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api-docs/openapi.json" in response.text

    def test_openapi_document_is_served(self, client):
        response = client.get("/api-docs/openapi.json")

        assert response.status_code == 200
        data = response.json()
        assert data["info"]["title"] == "Referral API"
        assert set(data["components"]["schemas"]) >= {"Referrer", "Patient", "Referral"}
        assert set(data["paths"]) == {"/api/referrals", "/api/referrals/{id}"}
        assert set(data["paths"]["/api/referrals"]) == {"get", "post"}

    def test_openapi_document_describes_invalid_input(self, client):
        data = client.get("/api-docs/openapi.json").json()
        invalid_input_ref = "#/components/schemas/InvalidInput"

        invalid_input = data["components"]["schemas"]["InvalidInput"]["properties"]
        assert set(invalid_input) == {"message", "errors"}
        assert invalid_input["errors"]["type"] == "array"

        create = data["paths"]["/api/referrals"]["post"]
        get_one = data["paths"]["/api/referrals/{id}"]["get"]
        for operation in (create, get_one):
            schema = operation["responses"]["400"]["content"]["application/json"]["schema"]
            assert schema["$ref"] == invalid_input_ref

        assert create["requestBody"]["required"] is False
        assert set(get_one["responses"]) == {"200", "400", "404"}

    def test_documented_400_matches_response_body(self, client):
        data = client.get("/api-docs/openapi.json").json()
        documented = set(data["components"]["schemas"]["InvalidInput"]["properties"])

        bad_id = client.get("/api/referrals/abc")
        bad_body = client.post("/api/referrals", json=["not", "an", "object"])

        for response in (bad_id, bad_body):
            assert response.status_code == 400
            assert set(response.json()) == documented
            assert set(response.json()["errors"][0]) == {"loc", "msg", "type"}

    def test_openapi_document_is_not_derived_from_handlers(self, client):
        paths = client.get("/api-docs/openapi.json").json()["paths"]

        assert "/api/health" not in paths
        assert "/" not in paths


class TestMiddleware:
    """Test middleware functionality."""

    def test_process_time_header(self, client):
        response = client.get("/api/referrals")

        assert "X-Process-Time" in response.headers
        assert float(response.headers["X-Process-Time"]) >= 0

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/referrals", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    def test_request_id_is_generated(self, client):
        response = client.get("/api/referrals")

        assert response.headers["X-Request-ID"]

    def test_cors_allows_any_origin_by_default(self, client):
        response = client.get("/api/referrals", headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/referrals",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_cors_restricted_origins(self, storage):
        restricted = create_app(ServerConfig(cors_origins=["http://allowed.example"]))
        restricted.dependency_overrides[get_storage_adapter] = lambda: storage

        with TestClient(restricted) as test_client:
            allowed = test_client.get("/api/referrals", headers={"Origin": "http://allowed.example"})
            denied = test_client.get("/api/referrals", headers={"Origin": "http://other.example"})

        assert allowed.headers["access-control-allow-origin"] == "http://allowed.example"
        assert "access-control-allow-origin" not in denied.headers

    def test_unexpected_error_returns_500(self, client):
        failing_service = Mock(spec=ReferralService)
        failing_service.list_referrals.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_referral_service] = lambda: failing_service

        response = client.get("/api/referrals")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Internal server error"
        assert "boom" not in data["detail"]


class TestStorageDependency:
    """Test the process-wide storage provider."""

    def test_storage_adapter_is_shared(self):
        get_storage_adapter.cache_clear()
        try:
            assert get_storage_adapter() is get_storage_adapter()
            assert isinstance(get_storage_adapter(), InMemoryReferralAdapter)
        finally:
            get_storage_adapter.cache_clear()

    def test_service_wraps_injected_storage(self, storage):
        service = get_referral_service(storage)

        assert isinstance(service, ReferralService)
        assert service.storage is storage

    def test_routes_share_the_overridden_storage(self, client, storage):
        client.post("/api/referrals", json={"notes": "x"})

        assert storage.count() == 1
        assert client.get("/api/health").json()["referrals"]["count"] == 1
