"""Tests for role administration."""

import pytest

from rbac_engine.config.constants import PERMISSIONS
from rbac_engine.core.exceptions import (
    ConflictError,
    InvalidPermissionCodeError,
    RoleInUseError,
    RoleNotFoundError,
    ValidationError,
)
from rbac_engine.features.teams.entities import Team

TENANT_ID = "tenant-1"


async def _warm(authorization, *user_ids):
    for user_id in user_ids:
        await authorization.get_effective_permissions(user_id)


class TestRoleCreation:
    """Test role creation and validation."""

    @pytest.mark.asyncio
    async def test_create_role(self, role_service):
        role = await role_service.create_role(
            TENANT_ID, "Support", "Front line", [PERMISSIONS.TICKETS_READ, PERMISSIONS.TICKETS_READ]
        )

        assert role.tenant_id == TENANT_ID
        assert role.name == "Support"
        assert role.permission_codes == {PERMISSIONS.TICKETS_READ}
        assert role.is_system_default is False

    @pytest.mark.asyncio
    async def test_unknown_code_rejected_with_details(self, role_service, repository):
        with pytest.raises(InvalidPermissionCodeError) as exc_info:
            await role_service.create_role(TENANT_ID, "Bad", None, ["tickets.fly", PERMISSIONS.TICKETS_READ])

        assert exc_info.value.invalid_codes == ["tickets.fly"]
        assert await repository.get_role_by_name(TENANT_ID, "Bad") is None

    @pytest.mark.asyncio
    async def test_unregistered_code_rejected(self, role_service, repository):
        """Test a vocabulary code missing from the store is rejected."""
        repository._permission_ids_by_code.pop(PERMISSIONS.CALLS_RECORD)

        with pytest.raises(InvalidPermissionCodeError):
            await role_service.create_role(TENANT_ID, "Callers", None, [PERMISSIONS.CALLS_RECORD])

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, role_service):
        with pytest.raises(ValidationError):
            await role_service.create_role(TENANT_ID, "   ", None, [])

    @pytest.mark.asyncio
    async def test_duplicate_name_in_tenant_conflicts(self, role_service):
        await role_service.create_role(TENANT_ID, "Support", None, [])

        with pytest.raises(ConflictError):
            await role_service.create_role(TENANT_ID, "Support", None, [])

    @pytest.mark.asyncio
    async def test_same_name_allowed_in_other_tenant(self, role_service):
        await role_service.create_role(TENANT_ID, "Support", None, [])
        other = await role_service.create_role("tenant-2", "Support", None, [])

        assert other.tenant_id == "tenant-2"

    @pytest.mark.asyncio
    async def test_list_roles_includes_global_roles(self, role_service):
        await role_service.create_role(None, "Platform", None, [PERMISSIONS.AUDIT_READ])
        await role_service.create_role(TENANT_ID, "Support", None, [])
        await role_service.create_role("tenant-2", "Hidden", None, [])

        names = [role.name for role in await role_service.list_roles(TENANT_ID)]

        assert names == ["Platform", "Support"]


class TestRoleUpdate:
    """Test role updates and the invalidation they trigger."""

    @pytest.mark.asyncio
    async def test_replacing_codes_invalidates_holders(self, role_service, authorization, cache):
        role = await role_service.create_role(TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ])
        await role_service.assign_role_to_user("u1", role.id)
        await _warm(authorization, "u1")

        updated = await role_service.update_role(role.id, permission_codes=[PERMISSIONS.TICKETS_UPDATE])

        assert updated.permission_codes == {PERMISSIONS.TICKETS_UPDATE}
        assert await cache.get("u1") is None
        assert await authorization.has_permission("u1", PERMISSIONS.TICKETS_UPDATE)
        assert not await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

    @pytest.mark.asyncio
    async def test_rename_keeps_cache(self, role_service, authorization, cache):
        role = await role_service.create_role(TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ])
        await role_service.assign_role_to_user("u1", role.id)
        await _warm(authorization, "u1")

        updated = await role_service.update_role(role.id, name="Helpdesk")

        assert updated.name == "Helpdesk"
        assert updated.permission_codes == {PERMISSIONS.TICKETS_READ}
        assert await cache.get("u1") == {PERMISSIONS.TICKETS_READ}

    @pytest.mark.asyncio
    async def test_update_missing_role(self, role_service):
        with pytest.raises(RoleNotFoundError):
            await role_service.update_role("missing", name="x")

    @pytest.mark.asyncio
    async def test_update_with_invalid_code_changes_nothing(self, role_service):
        role = await role_service.create_role(TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ])

        with pytest.raises(InvalidPermissionCodeError):
            await role_service.update_role(role.id, permission_codes=["nope.nope"])

        assert (await role_service.get_role(role.id)).permission_codes == {PERMISSIONS.TICKETS_READ}


class TestRoleDeletion:
    """Test deletion with and without forced reassignment."""

    @pytest.mark.asyncio
    async def test_delete_unassigned_role(self, role_service):
        role = await role_service.create_role(TENANT_ID, "Temp", None, [])

        assert await role_service.delete_role(role.id) == set()
        with pytest.raises(RoleNotFoundError):
            await role_service.get_role(role.id)

    @pytest.mark.asyncio
    async def test_delete_assigned_role_requires_reassignment(self, role_service):
        role = await role_service.create_role(TENANT_ID, "Support", None, [])
        await role_service.assign_role_to_user("u1", role.id)
        await role_service.assign_role_to_user("u2", role.id)

        with pytest.raises(RoleInUseError) as exc_info:
            await role_service.delete_role(role.id)

        assert exc_info.value.details["affected_users"] == 2
        assert exc_info.value.user_ids == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_forced_reassignment_migrates_users(
        self, role_service, repository, authorization, cache
    ):
        old = await role_service.create_role(TENANT_ID, "Old", None, [PERMISSIONS.TICKETS_READ])
        new = await role_service.create_role(TENANT_ID, "New", None, [PERMISSIONS.TICKETS_UPDATE])
        await role_service.assign_role_to_user("u1", old.id)
        await role_service.assign_role_to_user("u2", old.id)
        await role_service.assign_role_to_user("u2", new.id)
        await _warm(authorization, "u1", "u2")

        affected = await role_service.delete_role(old.id, force_reassign_to=new.id)

        assert affected == {"u1", "u2"}
        assert await repository.get_role_user_ids(new.id) == {"u1", "u2"}
        assert await cache.get("u1") is None
        assert await authorization.get_effective_permissions("u1") == {PERMISSIONS.TICKETS_UPDATE}

    @pytest.mark.asyncio
    async def test_delete_invalidates_team_members(self, role_service, repository, authorization, cache):
        """Test members inheriting the role through a team lose it."""
        role = await role_service.create_role(TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ])
        await repository.create_team(Team(id="t1", tenant_id=TENANT_ID, name="Support"))
        await repository.add_team_member("t1", "u3")
        await repository.add_team_role("t1", role.id)
        await _warm(authorization, "u3")

        affected = await role_service.delete_role(role.id)

        assert affected == {"u3"}
        assert await authorization.get_effective_permissions("u3") == frozenset()

    @pytest.mark.asyncio
    async def test_reassign_to_self_rejected(self, role_service):
        role = await role_service.create_role(TENANT_ID, "Support", None, [])

        with pytest.raises(ValidationError):
            await role_service.delete_role(role.id, force_reassign_to=role.id)

    @pytest.mark.asyncio
    async def test_reassign_to_missing_role(self, role_service):
        role = await role_service.create_role(TENANT_ID, "Support", None, [])
        await role_service.assign_role_to_user("u1", role.id)

        with pytest.raises(RoleNotFoundError):
            await role_service.delete_role(role.id, force_reassign_to="missing")
        assert (await role_service.get_role(role.id)).name == "Support"


class TestRoleAssignment:
    """Test idempotent user role assignment."""

    @pytest.mark.asyncio
    async def test_assign_twice_is_idempotent(self, role_service, repository):
        role = await role_service.create_role(TENANT_ID, "Support", None, [])

        assert await role_service.assign_role_to_user("u1", role.id, assigned_by="admin") is True
        assert await role_service.assign_role_to_user("u1", role.id) is False
        assert await repository.get_user_role_ids("u1") == {role.id}

    @pytest.mark.asyncio
    async def test_assign_missing_role(self, role_service):
        with pytest.raises(RoleNotFoundError):
            await role_service.assign_role_to_user("u1", "missing")

    @pytest.mark.asyncio
    async def test_revoke_takes_effect_immediately(self, role_service, authorization):
        role = await role_service.create_role(TENANT_ID, "Support", None, [PERMISSIONS.TICKETS_READ])
        await role_service.assign_role_to_user("u1", role.id)
        assert await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

        assert await role_service.revoke_role_from_user("u1", role.id) is True

        assert not await authorization.has_permission("u1", PERMISSIONS.TICKETS_READ)

    @pytest.mark.asyncio
    async def test_revoke_unheld_role(self, role_service):
        assert await role_service.revoke_role_from_user("u1", "whatever") is False
