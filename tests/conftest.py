"""Pytest configuration and fixtures for rbac-engine tests."""

import pytest
import pytest_asyncio

from rbac_engine.config.constants import BackendType
from rbac_engine.config.settings import RBACSettings
from rbac_engine.features.cache.adapters import MemoryCacheBackend
from rbac_engine.features.cache.services import PermissionCache
from rbac_engine.features.invalidation.adapters import InMemoryInvalidationBus
from rbac_engine.features.invalidation.services import PermissionInvalidator
from rbac_engine.features.permissions.repositories import InMemoryPermissionRepository
from rbac_engine.features.permissions.services import (
    AuthorizationService,
    EffectivePermissionCalculator,
    OverrideService,
    RoleService,
    SeedService,
)
from rbac_engine.features.teams.services import TeamService
from rbac_engine.module import create_engine


TENANT_ID = "tenant-1"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Memory-only settings that ignore any RBAC_* environment."""
    return RBACSettings(
        _env_file=None,
        cache_backend=BackendType.MEMORY,
        repository_backend=BackendType.MEMORY,
        invalidation_backend=BackendType.MEMORY,
        cache_ttl_seconds=60,
        node_id="node-a",
        seed_on_startup=True,
    )


@pytest_asyncio.fixture
async def repository():
    """In-memory repository with the permission vocabulary seeded."""
    repo = InMemoryPermissionRepository()
    await SeedService(repo, role_service=None).seed_permissions()
    return repo


@pytest.fixture
def cache_backend(clock):
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def cache(cache_backend):
    return PermissionCache(cache_backend, ttl_seconds=60)


@pytest.fixture
def invalidator(repository, cache):
    return PermissionInvalidator(repository, cache, bus=None, node_id="node-a")


@pytest.fixture
def calculator(repository):
    return EffectivePermissionCalculator(repository)


@pytest.fixture
def authorization(calculator, cache):
    return AuthorizationService(calculator, cache, timeout_seconds=1.0)


@pytest.fixture
def role_service(repository, invalidator):
    return RoleService(repository, invalidator)


@pytest.fixture
def team_service(repository, invalidator):
    return TeamService(repository, invalidator)


@pytest.fixture
def override_service(repository, invalidator):
    return OverrideService(repository, invalidator)


@pytest_asyncio.fixture
async def engine(settings, clock):
    """Started in-memory engine with the vocabulary seeded."""
    rbac = await create_engine(settings, clock=clock)
    await rbac.start()
    await rbac.seeder.seed_permissions()
    yield rbac
    await rbac.stop()
