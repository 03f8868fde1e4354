"""Tests for the team administration endpoints."""

import pytest

from rbac_engine.config.constants import PERMISSIONS

TENANT_ID = "tenant-1"
ADMIN = {"X-User-Id": "admin", "X-Tenant-Id": TENANT_ID}


class TestTeamEndpoints:
    """Test team management and inherited permissions over HTTP."""

    @pytest.mark.asyncio
    async def test_team_membership_grants_role_permissions(self, client, default_roles):
        created = await client.post(
            "/api/v1/teams", json={"name": "Support", "description": "Tier 1"}, headers=ADMIN
        )
        assert created.status_code == 201
        team_id = created.json()["id"]

        await client.post(f"/api/v1/teams/{team_id}/members", json={"userId": "u1"}, headers=ADMIN)
        assigned = await client.post(
            f"/api/v1/teams/{team_id}/roles", json={"roleId": default_roles["Agent"].id}, headers=ADMIN
        )
        members = await client.get(f"/api/v1/teams/{team_id}/members", headers=ADMIN)
        roles = await client.get(f"/api/v1/teams/{team_id}/roles", headers=ADMIN)
        permissions = await client.get("/api/v1/users/u1/permissions", headers=ADMIN)

        assert assigned.json() == {"changed": True}
        assert members.json() == {"teamId": team_id, "userIds": ["u1"]}
        assert [r["name"] for r in roles.json()] == ["Agent"]
        assert PERMISSIONS.TICKETS_CREATE in permissions.json()["permissions"]

    @pytest.mark.asyncio
    async def test_remove_member_and_delete_team(self, client, default_roles):
        team_id = (await client.post("/api/v1/teams", json={"name": "Support"}, headers=ADMIN)).json()["id"]
        await client.post(f"/api/v1/teams/{team_id}/members", json={"userId": "u1"}, headers=ADMIN)

        removed = await client.delete(f"/api/v1/teams/{team_id}/members/u1", headers=ADMIN)
        deleted = await client.delete(f"/api/v1/teams/{team_id}", headers=ADMIN)
        listed = await client.get("/api/v1/teams", headers=ADMIN)

        assert removed.json() == {"changed": True}
        assert deleted.status_code == 204
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_update_team(self, client):
        team_id = (await client.post("/api/v1/teams", json={"name": "Support"}, headers=ADMIN)).json()["id"]

        response = await client.put(f"/api/v1/teams/{team_id}", json={"name": "Helpdesk"}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["name"] == "Helpdesk"

    @pytest.mark.asyncio
    async def test_team_routes_need_tenant_context(self, client, engine, default_roles):
        response = await client.get("/api/v1/teams", headers={"X-User-Id": "admin"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_tenant_team_is_404(self, client, engine):
        foreign = await engine.teams.create_team("tenant-2", "Hidden")

        response = await client.get(f"/api/v1/teams/{foreign.id}/members", headers=ADMIN)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_other_tenant_role_cannot_be_assigned_to_team(self, client, engine):
        foreign_role = await engine.roles.create_role("tenant-2", "Billing", None, [PERMISSIONS.BILLING_MANAGE])
        team_id = (await client.post("/api/v1/teams", json={"name": "Support"}, headers=ADMIN)).json()["id"]
        await client.post(f"/api/v1/teams/{team_id}/members", json={"userId": "u1"}, headers=ADMIN)

        response = await client.post(
            f"/api/v1/teams/{team_id}/roles", json={"roleId": foreign_role.id}, headers=ADMIN
        )

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "RoleNotFoundError"
        assert await engine.teams.list_team_roles(team_id) == []
        assert not await engine.authorization.has_permission("u1", PERMISSIONS.BILLING_MANAGE)

    @pytest.mark.asyncio
    async def test_global_role_can_be_assigned_to_team(self, client, engine):
        global_role = await engine.roles.create_role(None, "Auditor", None, [PERMISSIONS.ANALYTICS_READ])
        team_id = (await client.post("/api/v1/teams", json={"name": "Audit"}, headers=ADMIN)).json()["id"]

        response = await client.post(
            f"/api/v1/teams/{team_id}/roles", json={"roleId": global_role.id}, headers=ADMIN
        )

        assert response.json() == {"changed": True}
