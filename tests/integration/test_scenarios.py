"""End-to-end permission scenarios across services, cache and bus."""

import pytest
import pytest_asyncio

from rbac_engine.config.constants import PERMISSIONS
from rbac_engine.core.exceptions import ValidationError
from rbac_engine.features.invalidation.adapters import InMemoryInvalidationBus
from rbac_engine.features.permissions.repositories import InMemoryPermissionRepository
from rbac_engine.module import create_engine

TENANT_ID = "tenant-1"


@pytest_asyncio.fixture
async def cluster(settings, clock):
    """Two nodes sharing one store, each with a local cache, on one bus."""
    repository = InMemoryPermissionRepository()
    bus = InMemoryInvalidationBus()
    node_a = await create_engine(settings, repository=repository, bus=bus, clock=clock)
    node_b = await create_engine(
        settings.model_copy(update={"node_id": "node-b"}), repository=repository, bus=bus, clock=clock
    )
    await node_a.start()
    await node_b.start()
    await node_a.seeder.seed_permissions()
    yield node_a, node_b, bus
    await node_a.stop()
    await node_b.stop()


class TestPermissionScenarios:
    """Scenarios on a single node."""

    @pytest.mark.asyncio
    async def test_deny_override_wins_over_role(self, engine):
        role = await engine.roles.create_role(TENANT_ID, "R", None, [PERMISSIONS.TICKETS_CREATE])
        await engine.roles.assign_role_to_user("U", role.id)
        await engine.overrides.set_user_permission_override("U", PERMISSIONS.TICKETS_CREATE, allow=False)

        assert await engine.authorization.has_permission("U", PERMISSIONS.TICKETS_CREATE) is False

    @pytest.mark.asyncio
    async def test_allow_override_without_role(self, engine):
        await engine.overrides.set_user_permission_override("U", PERMISSIONS.BILLING_MANAGE, allow=True)

        assert await engine.authorization.has_permission("U", PERMISSIONS.BILLING_MANAGE) is True

    @pytest.mark.asyncio
    async def test_team_inheritance(self, engine):
        role = await engine.roles.create_role(TENANT_ID, "R", None, [PERMISSIONS.CUSTOMERS_READ])
        team = await engine.teams.create_team(TENANT_ID, "T")
        await engine.teams.assign_role_to_team(team.id, role.id)
        await engine.teams.add_team_member(team.id, "U")

        assert PERMISSIONS.CUSTOMERS_READ in await engine.authorization.get_effective_permissions("U")

    @pytest.mark.asyncio
    async def test_revoke_propagates_immediately(self, engine):
        agent = await engine.roles.create_role(
            TENANT_ID, "Agent", None, [PERMISSIONS.TICKETS_READ, PERMISSIONS.TICKETS_CREATE]
        )
        await engine.roles.assign_role_to_user("U", agent.id)
        assert await engine.authorization.has_permission("U", PERMISSIONS.TICKETS_CREATE)

        await engine.roles.revoke_role_from_user("U", agent.id)

        assert await engine.authorization.has_permission("U", PERMISSIONS.TICKETS_CREATE) is False

    @pytest.mark.asyncio
    async def test_forced_deletion_migrates_grants(self, engine):
        role_a = await engine.roles.create_role(TENANT_ID, "A", None, [PERMISSIONS.FILES_READ])
        role_b = await engine.roles.create_role(TENANT_ID, "B", None, [PERMISSIONS.FILES_UPLOAD])
        await engine.roles.assign_role_to_user("U", role_a.id)
        assert await engine.authorization.get_effective_permissions("U") == {PERMISSIONS.FILES_READ}

        await engine.roles.delete_role(role_a.id, force_reassign_to=role_b.id)

        assert await engine.authorization.get_effective_permissions("U") == {PERMISSIONS.FILES_UPLOAD}
        assert await engine.repository.get_role(role_a.id) is None

    @pytest.mark.asyncio
    async def test_idempotent_assignment(self, engine):
        role = await engine.roles.create_role(TENANT_ID, "R", None, [PERMISSIONS.TICKETS_READ])

        await engine.roles.assign_role_to_user("U", role.id)
        await engine.roles.assign_role_to_user("U", role.id)

        assert await engine.repository.get_role_user_ids(role.id) == {"U"}
        assert await engine.authorization.get_effective_permissions("U") == {PERMISSIONS.TICKETS_READ}

    @pytest.mark.asyncio
    async def test_unknown_code_creates_no_role(self, engine):
        with pytest.raises(ValidationError):
            await engine.roles.create_role(TENANT_ID, "Broken", None, ["not.a.real.code"])

        assert await engine.roles.list_roles(TENANT_ID) == []

    @pytest.mark.asyncio
    async def test_viewer_direct_and_manager_through_ops_team(self, engine):
        viewer = await engine.roles.create_role(None, "Viewer", None, [PERMISSIONS.TICKETS_READ])
        manager = await engine.roles.create_role(
            TENANT_ID,
            "Manager",
            None,
            [PERMISSIONS.TICKETS_READ, PERMISSIONS.TICKETS_CREATE, PERMISSIONS.TICKETS_ASSIGN],
        )
        ops = await engine.teams.create_team(TENANT_ID, "Ops")
        await engine.teams.assign_role_to_team(ops.id, manager.id)
        await engine.roles.assign_role_to_user("U", viewer.id)
        await engine.teams.add_team_member(ops.id, "U")

        assert await engine.authorization.get_effective_permissions("U") == {
            PERMISSIONS.TICKETS_READ,
            PERMISSIONS.TICKETS_CREATE,
            PERMISSIONS.TICKETS_ASSIGN,
        }


class TestMultiNodeCoherence:
    """Scenarios across two nodes with separate caches."""

    @pytest.mark.asyncio
    async def test_invalidation_reaches_other_node(self, cluster):
        node_a, node_b, bus = cluster
        role = await node_a.roles.create_role(TENANT_ID, "Agent", None, [PERMISSIONS.TICKETS_READ])
        await node_a.roles.assign_role_to_user("U", role.id)
        assert await node_b.authorization.has_permission("U", PERMISSIONS.TICKETS_READ)

        await node_a.roles.revoke_role_from_user("U", role.id)
        await node_a.invalidator.drain()
        await bus.join()

        assert await node_b.cache.get("U") is None
        assert await node_b.authorization.has_permission("U", PERMISSIONS.TICKETS_READ) is False

    @pytest.mark.asyncio
    async def test_dropped_event_is_bounded_by_ttl(self, settings, clock):
        """Test a node missing the event serves stale data for at most one TTL."""
        repository = InMemoryPermissionRepository()
        node_a = await create_engine(
            settings, repository=repository, bus=InMemoryInvalidationBus(), clock=clock
        )
        node_b = await create_engine(
            settings.model_copy(update={"node_id": "node-b"}),
            repository=repository,
            bus=InMemoryInvalidationBus(),
            clock=clock,
        )
        await node_a.start()
        await node_b.start()
        try:
            await node_a.seeder.seed_permissions()
            role = await node_a.roles.create_role(TENANT_ID, "Agent", None, [PERMISSIONS.TICKETS_READ])
            await node_a.roles.assign_role_to_user("U", role.id)
            assert await node_b.authorization.has_permission("U", PERMISSIONS.TICKETS_READ)

            await node_a.roles.revoke_role_from_user("U", role.id)
            await node_a.invalidator.drain()

            clock.advance(settings.cache_ttl_seconds - 1)
            assert await node_b.authorization.has_permission("U", PERMISSIONS.TICKETS_READ) is True
            clock.advance(1)
            assert await node_b.authorization.has_permission("U", PERMISSIONS.TICKETS_READ) is False
        finally:
            await node_a.stop()
            await node_b.stop()
