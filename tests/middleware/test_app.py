"""Tests for middleware, health routes and the app root."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from app.db import Database
from app.middleware import REQUEST_ID_HEADER


class TestRequestId:
    """Tests for request id propagation."""

    async def test_generated_when_missing(self, client: AsyncClient) -> None:
        response = await client.get("/api/ping")

        assert len(response.headers[REQUEST_ID_HEADER]) == 32

    async def test_incoming_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/api/ping", headers={REQUEST_ID_HEADER: "req-abc"})

        assert response.headers[REQUEST_ID_HEADER] == "req-abc"


class TestSecurityHeaders:
    async def test_headers_present(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestCors:
    async def test_allowed_origin(self, client: AsyncClient) -> None:
        response = await client.options(
            "/api/blogs/",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    async def test_unknown_origin(self, client: AsyncClient) -> None:
        response = await client.get("/api/ping", headers={"Origin": "https://evil.example"})

        assert "access-control-allow-origin" not in response.headers


class TestHealthRoutes:
    """Tests for the root, ping and health routes."""

    async def test_root(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["message"].startswith("Welcome to")

    async def test_ping(self, client: AsyncClient) -> None:
        body = (await client.get("/api/ping")).json()

        assert body["message"] == "pong"
        assert body["status"] == "healthy"
        assert body["timestamp"]
        assert "server" in body

    async def test_health_connected(self, client: AsyncClient) -> None:
        body = (await client.get("/health")).json()

        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert body["version"] == "1.0.0"

    async def test_health_degraded(self, client: AsyncClient, database: Database) -> None:
        with patch.object(database, "ping", AsyncMock(return_value=False)):
            body = (await client.get("/health")).json()

        assert body["status"] == "degraded"
        assert body["database"] == "unreachable"
