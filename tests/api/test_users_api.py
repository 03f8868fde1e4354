"""Tests for the user permission endpoints and the application factory."""

import pytest
from fastapi.testclient import TestClient

from rbac_engine.api import create_app
from rbac_engine.config.constants import PERMISSIONS

TENANT_ID = "tenant-1"
ADMIN = {"X-User-Id": "admin", "X-Tenant-Id": TENANT_ID}
VIEWER = {"X-User-Id": "viewer", "X-Tenant-Id": TENANT_ID}


class TestUserEndpoints:
    """Test effective permission reads and overrides over HTTP."""

    @pytest.mark.asyncio
    async def test_effective_permissions(self, client, default_roles):
        response = await client.get("/api/v1/users/viewer/permissions", headers=ADMIN)

        assert response.status_code == 200
        assert response.json() == {
            "userId": "viewer",
            "permissions": sorted(
                [
                    PERMISSIONS.CUSTOMERS_READ,
                    PERMISSIONS.TICKETS_READ,
                    PERMISSIONS.MESSAGES_READ,
                    PERMISSIONS.ANALYTICS_READ,
                ]
            ),
        }

    @pytest.mark.asyncio
    async def test_override_lifecycle(self, client):
        put = await client.put(
            "/api/v1/users/viewer/overrides",
            json={"permissionCode": PERMISSIONS.TICKETS_READ, "allow": False},
            headers=ADMIN,
        )
        listed = await client.get("/api/v1/users/viewer/overrides", headers=ADMIN)
        breakdown = await client.get("/api/v1/users/viewer/permissions/breakdown", headers=ADMIN)

        assert put.status_code == 200
        assert put.json()["createdBy"] == "admin"
        assert [o["permissionCode"] for o in listed.json()] == [PERMISSIONS.TICKETS_READ]
        assert breakdown.json()["deniedOverrides"] == [PERMISSIONS.TICKETS_READ]
        assert PERMISSIONS.TICKETS_READ in breakdown.json()["granted"]
        assert PERMISSIONS.TICKETS_READ not in breakdown.json()["permissions"]

        deleted = await client.delete(
            f"/api/v1/users/viewer/overrides/{PERMISSIONS.TICKETS_READ}", headers=ADMIN
        )
        assert deleted.json() == {"changed": True}

    @pytest.mark.asyncio
    async def test_viewer_cannot_set_overrides(self, client):
        response = await client.put(
            "/api/v1/users/viewer/overrides",
            json={"permissionCode": PERMISSIONS.BILLING_MANAGE, "allow": True},
            headers=VIEWER,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_health(self, client, engine):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["nodeId"] == engine.node_id
        assert "hits" in response.json()["cache"]


def test_lifespan_builds_and_seeds_engine(settings):
    """Test the app builds its own engine when none is injected."""
    app = create_app(settings)

    with TestClient(app) as client:
        engine = app.state.engine
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/api/v1/roles/permissions").status_code == 401
        seeded = len(engine.repository._permissions)

    assert seeded > 0
    assert app.state.engine is None
