"""Tests for API middleware and error formatting."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import AsyncClient

from sportsmart.api.middleware import setup_middleware
from sportsmart.main import app


@pytest.fixture
def sync_client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, sync_client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = sync_client.get("/health")
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        # UUID format
        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36

    def test_uses_provided_request_id(self, sync_client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = sync_client.get(
            "/health",
            headers={"X-Request-ID": custom_id},
        )
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == custom_id

    @pytest.mark.parametrize("header", ["x" * 65, "id with spaces", "../../etc"])
    def test_unsafe_request_id_is_replaced(self, sync_client: TestClient, header: str) -> None:
        response = sync_client.get("/health", headers={"X-Request-ID": header})
        request_id = response.headers["X-Request-ID"]
        assert request_id != header
        assert len(request_id) == 36


class TestErrorFormat:
    """Tests for the error response envelope."""

    def test_unknown_route(self, sync_client: TestClient) -> None:
        response = sync_client.get("/api/nope")
        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "Not Found"
        assert data["error_code"] == "ERROR"

    @pytest.mark.asyncio
    async def test_error_carries_request_id(self, client: AsyncClient, catalog) -> None:
        response = await client.get(
            "/api/products/no-such-product",
            headers={"X-Request-ID": "trace-me"},
        )
        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-me"
        assert response.headers["X-Request-ID"] == "trace-me"

    @pytest.mark.asyncio
    async def test_malformed_json_body_is_400(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/products",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestErrorHandlerMiddleware:
    """Tests for exceptions escaping the routers."""

    def test_unhandled_exception_uses_envelope(self) -> None:
        """Should hide internals behind a static 500 message."""
        broken = FastAPI()
        setup_middleware(broken)

        @broken.get("/boom")
        async def boom() -> None:
            raise RuntimeError("connection string leaked")

        response = TestClient(broken, raise_server_exceptions=False).get(
            "/boom", headers={"X-Request-ID": "boom-1"}
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "An internal error occurred",
            "error_code": "INTERNAL_ERROR",
            "request_id": "boom-1",
        }
