"""
Integration Tests - Error Responses and Health Checks
"""
from httpx import ASGITransport, AsyncClient

from studio.database.connection import Database
from studio.main import create_app


class TestErrorResponses:
    """Tests for the JSON error handlers"""

    async def test_unknown_route(self, client):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Route not found"
        assert body["path"] == "/api/does-not-exist"
        assert body["method"] == "GET"
        assert "timestamp" in body

    async def test_invalid_body_is_400(self, client):
        response = await client.post("/api/clients", json={"firstName": "NoEmail"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"]

    async def test_unhandled_exception_is_500(self, app, client):
        async def explode():
            raise RuntimeError("kaboom")

        app.add_api_route("/api/explode", explode)

        response = await client.get("/api/explode")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Internal server error"
        assert body["message"] == "kaboom"

    async def test_security_headers(self, client):
        response = await client.get("/api/health/live")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Request-ID" in response.headers


class TestHealthApi:
    """Tests for /api/health"""

    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["environment"] == "testing"
        assert body["version"] == "1.0.0"
        assert body["checks"]["database"]["status"] == "healthy"

    async def test_live_and_ready(self, client):
        assert (await client.get("/api/health/live")).json() == {"status": "alive"}
        assert (await client.get("/api/health/ready")).json() == {"status": "ready"}

    async def test_not_ready_without_database(self, test_settings, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path}/missing/dir/studio.db")
        app = create_app(settings=test_settings, database=database)
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as http:
            ready = await http.get("/api/health/ready")
            health = await http.get("/api/health")

        await database.dispose()

        assert ready.status_code == 503
        assert ready.json()["reason"] == "database_unavailable"
        assert health.json()["status"] == "degraded"
        assert health.json()["checks"]["database"]["status"] == "unhealthy"
