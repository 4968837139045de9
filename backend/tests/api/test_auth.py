"""
Tests for the auth endpoints and session gating of data routes.
"""

import pytest

from db.session_manager import SessionState


LOGIN_BODY = {
    "host": "db.internal",
    "port": 5432,
    "database": "reconcile",
    "schema": "pgcompare",
    "user": "admin",
    "password": "s3cret",
}


class TestLogin:
    """Test POST /api/auth/login."""

    @pytest.mark.asyncio
    async def test_login_success(self, client, manager, engine_factory):
        """Test probing and installing the session."""
        response = await client.post("/api/auth/login", json=LOGIN_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert manager.state == SessionState.CONNECTED
        probe, session_engine = engine_factory.engines
        assert probe.disposed is True
        assert session_engine.disposed is False

    @pytest.mark.asyncio
    async def test_login_without_schema_uses_default(self, client, manager):
        """Test the schema default through the API."""
        body = {k: v for k, v in LOGIN_BODY.items() if k != "schema"}

        response = await client.post("/api/auth/login", json=body)

        assert response.status_code == 200
        assert manager.schema == "pgcompare"

    @pytest.mark.asyncio
    async def test_login_failure_returns_401_with_message(self, client, manager, engine_factory):
        """Test a failed probe."""
        engine_factory.connect_error = RuntimeError('password authentication failed for user "admin"')

        response = await client.post("/api/auth/login", json=LOGIN_BODY)

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": 'password authentication failed for user "admin"',
        }
        assert manager.state == SessionState.DISCONNECTED
        assert len(engine_factory.engines) == 1

    @pytest.mark.asyncio
    async def test_failed_login_keeps_previous_session(self, client, manager, engine_factory):
        """Test that a bad login does not tear down a working session."""
        await client.post("/api/auth/login", json=LOGIN_BODY)
        engine = await manager.get_active()
        engine_factory.connect_error = RuntimeError("timeout expired")

        response = await client.post("/api/auth/login", json={**LOGIN_BODY, "host": "bad"})

        assert response.status_code == 401
        assert await manager.get_active() is engine

    @pytest.mark.asyncio
    async def test_second_login_replaces_session(self, client, manager, engine_factory):
        """Test switching databases."""
        await client.post("/api/auth/login", json=LOGIN_BODY)
        first = await manager.get_active()

        await client.post("/api/auth/login", json={**LOGIN_BODY, "schema": "audit"})

        assert first.disposed is True
        assert manager.schema == "audit"

    @pytest.mark.asyncio
    async def test_login_missing_fields_rejected(self, client, manager):
        """Test validation of the credentials body."""
        response = await client.post("/api/auth/login", json={"host": "db"})

        assert response.status_code == 422
        assert manager.state == SessionState.DISCONNECTED


class TestLogout:
    """Test POST /api/auth/logout."""

    @pytest.mark.asyncio
    async def test_logout_closes_session(self, client, manager):
        """Test logout after login."""
        await client.post("/api/auth/login", json=LOGIN_BODY)

        response = await client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert manager.state == SessionState.DISCONNECTED
        assert manager.credentials is None

    @pytest.mark.asyncio
    async def test_logout_twice_succeeds(self, client):
        """Test logout idempotence."""
        first = await client.post("/api/auth/logout")
        second = await client.post("/api/auth/logout")

        assert first.json() == {"success": True}
        assert second.json() == {"success": True}


class TestStatus:
    """Test GET /api/auth/status."""

    @pytest.mark.asyncio
    async def test_status_inactive(self, client):
        """Test status before login."""
        response = await client.get("/api/auth/status")
        assert response.json() == {"connected": False, "schema": "pgcompare"}

    @pytest.mark.asyncio
    async def test_status_active_omits_password(self, client):
        """Test status after login."""
        await client.post("/api/auth/login", json={**LOGIN_BODY, "schema": "audit"})

        response = await client.get("/api/auth/status")

        assert response.json() == {
            "connected": True,
            "schema": "audit",
            "host": "db.internal",
            "port": 5432,
            "database": "reconcile",
            "user": "admin",
        }
        assert "s3cret" not in response.text


class TestSessionGate:
    """Test that data routes require a session."""

    @pytest.mark.asyncio
    async def test_data_route_without_login_returns_401(self, client):
        """Test a data route before login."""
        response = await client.get("/api/projects")

        assert response.status_code == 401
        assert response.json() == {"detail": "Database not initialized. Please login again."}

    @pytest.mark.asyncio
    async def test_data_route_after_logout_returns_401(self, client):
        """Test a data route after logout."""
        await client.post("/api/auth/login", json=LOGIN_BODY)
        await client.post("/api/auth/logout")

        response = await client.get("/api/tables/1")

        assert response.status_code == 401


class TestHealth:
    """Test the service endpoints."""

    @pytest.mark.asyncio
    async def test_health_reports_disconnected_before_login(self, client):
        """Test health without a session."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_health_reports_connected_after_login(self, client):
        """Test health with a session."""
        await client.post("/api/auth/login", json=LOGIN_BODY)

        response = await client.get("/health")

        assert response.json()["database"] == "connected"
        assert response.json()["schema"] == "pgcompare"

    @pytest.mark.asyncio
    async def test_root(self, client):
        """Test the root endpoint."""
        response = await client.get("/")
        assert response.json()["health_url"] == "/health"
