"""Tests for team administration."""

import pytest
import pytest_asyncio

from rbac_engine.config.constants import PERMISSIONS
from rbac_engine.core.exceptions import RoleNotFoundError, TeamNotFoundError, ValidationError

TENANT_ID = "tenant-1"


@pytest_asyncio.fixture
async def support_role(role_service):
    return await role_service.create_role(
        TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ, PERMISSIONS.MESSAGES_READ]
    )


class TestTeamLifecycle:
    """Test team creation, update and deletion."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, team_service):
        await team_service.create_team(TENANT_ID, "Beta")
        await team_service.create_team(TENANT_ID, "Alpha", "First line")
        await team_service.create_team("tenant-2", "Gamma")

        names = [team.name for team in await team_service.list_teams(TENANT_ID)]

        assert names == ["Alpha", "Beta"]

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, team_service):
        with pytest.raises(ValidationError):
            await team_service.create_team(TENANT_ID, " ")

    @pytest.mark.asyncio
    async def test_update_team(self, team_service):
        team = await team_service.create_team(TENANT_ID, "Alpha")

        updated = await team_service.update_team(team.id, name="Omega", description="Renamed")

        assert updated.name == "Omega"
        assert updated.description == "Renamed"
        assert updated.updated_at >= team.updated_at

    @pytest.mark.asyncio
    async def test_missing_team(self, team_service):
        with pytest.raises(TeamNotFoundError):
            await team_service.get_team("missing")
        with pytest.raises(TeamNotFoundError):
            await team_service.add_team_member("missing", "u1")

    @pytest.mark.asyncio
    async def test_delete_team_revokes_inherited_roles(
        self, team_service, support_role, authorization
    ):
        team = await team_service.create_team(TENANT_ID, "Support")
        await team_service.assign_role_to_team(team.id, support_role.id)
        await team_service.add_team_member(team.id, "u1")
        assert await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

        affected = await team_service.delete_team(team.id)

        assert affected == {"u1"}
        assert not await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)


class TestTeamMembership:
    """Test membership changes and inherited permissions."""

    @pytest.mark.asyncio
    async def test_join_and_leave(self, team_service, support_role, authorization):
        team = await team_service.create_team(TENANT_ID, "Support")
        await team_service.assign_role_to_team(team.id, support_role.id)
        assert await authorization.get_effective_permissions("u1") == frozenset()

        assert await team_service.add_team_member(team.id, "u1") is True
        assert await team_service.add_team_member(team.id, "u1") is False
        assert await authorization.has_all("u1", [PERMISSIONS.TICKETS_READ, PERMISSIONS.MESSAGES_READ])

        assert await team_service.remove_team_member(team.id, "u1") is True
        assert await team_service.remove_team_member(team.id, "u1") is False
        assert await authorization.get_effective_permissions("u1") == frozenset()

    @pytest.mark.asyncio
    async def test_list_members_sorted(self, team_service):
        team = await team_service.create_team(TENANT_ID, "Support")
        for user_id in ("u3", "u1", "u2"):
            await team_service.add_team_member(team.id, user_id)

        assert await team_service.list_members(team.id) == ["u1", "u2", "u3"]


class TestTeamRoles:
    """Test linking roles to teams."""

    @pytest.mark.asyncio
    async def test_assigning_role_invalidates_every_member(
        self, team_service, support_role, authorization, cache
    ):
        team = await team_service.create_team(TENANT_ID, "Support")
        await team_service.add_team_member(team.id, "u1")
        await team_service.add_team_member(team.id, "u2")
        await authorization.get_effective_permissions("u1")
        await authorization.get_effective_permissions("u2")

        assert await team_service.assign_role_to_team(team.id, support_role.id) is True
        assert await team_service.assign_role_to_team(team.id, support_role.id) is False

        assert await cache.get("u1") is None
        assert await cache.get("u2") is None
        assert await authorization.has_permission("u2", PERMISSIONS.MESSAGES_READ)
        assert [r.id for r in await team_service.list_team_roles(team.id)] == [support_role.id]

    @pytest.mark.asyncio
    async def test_remove_role_from_team(self, team_service, support_role, authorization):
        team = await team_service.create_team(TENANT_ID, "Support")
        await team_service.add_team_member(team.id, "u1")
        await team_service.assign_role_to_team(team.id, support_role.id)
        assert await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

        assert await team_service.remove_role_from_team(team.id, support_role.id) is True

        assert not await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

    @pytest.mark.asyncio
    async def test_assign_missing_role(self, team_service):
        team = await team_service.create_team(TENANT_ID, "Support")

        with pytest.raises(RoleNotFoundError):
            await team_service.assign_role_to_team(team.id, "missing")
