"""Permission invalidation service.

Administration services call this after every mutation. Affected users are
evicted from the local cache before the call returns; the bus publish that
reaches other instances runs in the background and never fails the caller.
"""

import asyncio
import logging
from typing import Iterable, Optional, Set

from ...cache.services.permission_cache import PermissionCache
from ...permissions.entities.protocols import PermissionRepository
from ..entities.event import InvalidationEvent
from ..entities.protocols import InvalidationBus


logger = logging.getLogger(__name__)


class PermissionInvalidator:
    """Evicts stale permission sets locally and fans the eviction out."""

    def __init__(
        self,
        repository: PermissionRepository,
        cache: PermissionCache,
        bus: Optional[InvalidationBus] = None,
        node_id: str = "local",
    ):
        self.repository = repository
        self.cache = cache
        self.bus = bus
        self.node_id = node_id
        self._pending: Set[asyncio.Task] = set()
        self.failed_publishes = 0

    # Affected user enumeration

    async def users_with_role(self, role_id: str) -> Set[str]:
        """Users holding the role directly or through any team."""
        direct = await self.repository.get_role_user_ids(role_id)
        via_teams = await self.repository.get_role_team_member_ids(role_id)
        return direct | via_teams

    async def team_members(self, team_id: str) -> Set[str]:
        return await self.repository.get_team_member_ids(team_id)

    # Invalidation

    async def invalidate_users(self, user_ids: Iterable[str], reason: Optional[str] = None) -> Set[str]:
        """Evict users locally and schedule the bus publish.

        Returns the set of user IDs that were invalidated.
        """
        affected = set(user_ids)
        if not affected:
            return affected

        await self.cache.delete_many(affected)
        logger.debug(f"Invalidated {len(affected)} user(s) locally ({reason})")

        if self.bus is not None:
            event = InvalidationEvent.for_users(affected, source_node=self.node_id, reason=reason)
            task = asyncio.create_task(self._publish(event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return affected

    async def invalidate_role(self, role_id: str, reason: Optional[str] = None) -> Set[str]:
        return await self.invalidate_users(await self.users_with_role(role_id), reason)

    async def invalidate_team(self, team_id: str, reason: Optional[str] = None) -> Set[str]:
        return await self.invalidate_users(await self.team_members(team_id), reason)

    async def _publish(self, event: InvalidationEvent) -> None:
        try:
            await self.bus.publish(event)
        except Exception as e:
            # The cache TTL bounds staleness on other instances
            self.failed_publishes += 1
            logger.warning(
                f"Failed to publish invalidation {event.event_id} "
                f"for {len(event.user_ids)} user(s): {e}"
            )

    async def drain(self) -> None:
        """Wait for every scheduled publish to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    @property
    def pending_publishes(self) -> int:
        return len(self._pending)

    # Subscriber side

    async def handle_event(self, event: InvalidationEvent) -> None:
        """Bus handler evicting the named users from the local cache."""
        await self.cache.delete_many(event.user_ids)
        logger.debug(
            f"Applied invalidation {event.event_id} from {event.source_node} "
            f"for {len(event.user_ids)} user(s)"
        )

    def attach(self) -> None:
        """Subscribe ``handle_event`` to the bus."""
        if self.bus is not None:
            self.bus.subscribe(self.handle_event)
