"""Composition root wiring the engine from settings.

Every component is constructed explicitly and handed to its consumers; no
module-level singletons are involved, so several engines can coexist in one
process (one per simulated node in tests).
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from redis.asyncio import Redis

from .config.constants import BackendType
from .config.settings import RBACSettings
from .core.clock import Clock, monotonic_clock
from .features.cache.adapters import MemoryCacheBackend, RedisCacheBackend
from .features.cache.entities import CacheBackend
from .features.cache.services import PermissionCache
from .features.invalidation.adapters import InMemoryInvalidationBus, RedisInvalidationBus
from .features.invalidation.entities import InvalidationBus
from .features.invalidation.services import PermissionInvalidator
from .features.permissions.entities import PermissionRepository
from .features.permissions.repositories import (
    AsyncPGPermissionRepository,
    InMemoryPermissionRepository,
)
from .features.permissions.services import (
    AuthorizationService,
    EffectivePermissionCalculator,
    OverrideService,
    RoleService,
    SeedService,
)
from .features.teams.services import TeamService


logger = logging.getLogger(__name__)


@dataclass
class RBACEngine:
    """All engine components of one service instance."""

    settings: RBACSettings
    repository: PermissionRepository
    cache: PermissionCache
    bus: Optional[InvalidationBus]
    calculator: EffectivePermissionCalculator
    authorization: AuthorizationService
    invalidator: PermissionInvalidator
    roles: RoleService
    teams: TeamService
    overrides: OverrideService
    seeder: SeedService
    _closers: List[Callable[[], Awaitable[None]]] = field(default_factory=list, repr=False)
    _started: bool = field(default=False, repr=False)

    @property
    def node_id(self) -> str:
        return self.invalidator.node_id

    async def start(self) -> None:
        """Start the invalidation subscriber."""
        if self._started:
            return
        if self.bus is not None:
            await self.bus.start()
        self._started = True
        logger.info(f"RBAC engine started on node {self.node_id}")

    async def stop(self) -> None:
        """Flush pending publishes, stop the bus and release connections."""
        await self.invalidator.drain()
        if self.bus is not None and self._started:
            await self.bus.stop()
        for close in reversed(self._closers):
            try:
                await close()
            except Exception as e:
                logger.warning(f"Error releasing engine resource: {e}")
        self._closers.clear()
        self._started = False
        logger.info(f"RBAC engine stopped on node {self.node_id}")


async def create_engine(
    settings: Optional[RBACSettings] = None,
    *,
    repository: Optional[PermissionRepository] = None,
    cache_backend: Optional[CacheBackend] = None,
    bus: Optional[InvalidationBus] = None,
    clock: Clock = monotonic_clock,
) -> RBACEngine:
    """Build an engine, creating any component not passed in from settings.

    Args:
        settings: Engine settings, defaults to ``RBACSettings()``
        repository: Permission store to use instead of the configured one
        cache_backend: Cache backend to use instead of the configured one
        bus: Invalidation bus to use instead of the configured one
        clock: Monotonic clock for the memory cache backend
    """
    settings = settings or RBACSettings()
    closers: List[Callable[[], Awaitable[None]]] = []
    redis_client: Optional[Redis] = None

    def get_redis() -> Redis:
        nonlocal redis_client
        if redis_client is None:
            if not settings.redis_url:
                raise ValueError("RBAC_REDIS_URL is required for redis backends")
            redis_client = Redis.from_url(settings.redis_url)
            closers.append(redis_client.aclose)
        return redis_client

    if repository is None:
        if settings.repository_backend == BackendType.POSTGRES:
            if not settings.database_url:
                raise ValueError("RBAC_DATABASE_URL is required for the postgres repository")
            pg_repository = await AsyncPGPermissionRepository.connect(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
            )
            closers.append(pg_repository.close)
            await pg_repository.create_schema()
            repository = pg_repository
        else:
            repository = InMemoryPermissionRepository()

    if cache_backend is None:
        if settings.cache_backend == BackendType.REDIS:
            cache_backend = RedisCacheBackend(get_redis())
        else:
            cache_backend = MemoryCacheBackend(clock=clock, max_entries=settings.cache_max_entries)

    if bus is None:
        if settings.invalidation_backend == BackendType.REDIS:
            bus = RedisInvalidationBus(get_redis(), channel=settings.invalidation_channel)
        else:
            bus = InMemoryInvalidationBus()

    cache = PermissionCache(cache_backend, ttl_seconds=settings.cache_ttl_seconds)
    calculator = EffectivePermissionCalculator(repository)
    invalidator = PermissionInvalidator(repository, cache, bus, node_id=settings.node_id)
    invalidator.attach()
    roles = RoleService(repository, invalidator)

    engine = RBACEngine(
        settings=settings,
        repository=repository,
        cache=cache,
        bus=bus,
        calculator=calculator,
        authorization=AuthorizationService(
            calculator, cache, timeout_seconds=settings.repository_timeout_seconds
        ),
        invalidator=invalidator,
        roles=roles,
        teams=TeamService(repository, invalidator),
        overrides=OverrideService(repository, invalidator),
        seeder=SeedService(repository, roles),
        _closers=closers,
    )
    logger.info(
        f"Built RBAC engine: repository={type(repository).__name__}, "
        f"cache={type(cache_backend).__name__}, bus={type(bus).__name__}, "
        f"ttl={settings.cache_ttl_seconds}s"
    )
    return engine
