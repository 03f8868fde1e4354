"""Redis cache backend."""

import logging
from typing import Iterable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ....config.constants import CacheKeys
from ....core.exceptions import CacheError


logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """Cache backend storing values with ``SET key value EX ttl``.

    Entries are shared by every service instance pointing at the same Redis,
    so an eviction on one node is visible to all of them.
    """

    def __init__(self, redis_client: Redis):
        self.redis_client = redis_client

    async def get(self, key: str) -> Optional[bytes]:
        try:
            value = await self.redis_client.get(key)
        except RedisError as e:
            raise CacheError(f"Failed to get cache key {key}: {e}") from e
        if value is None:
            return None
        return value.encode("utf-8") if isinstance(value, str) else value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self.redis_client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheError(f"Failed to set cache key {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self.redis_client.delete(key))
        except RedisError as e:
            raise CacheError(f"Failed to delete cache key {key}: {e}") from e

    async def delete_many(self, keys: Iterable[str]) -> int:
        key_list: List[str] = list(keys)
        if not key_list:
            return 0
        try:
            return int(await self.redis_client.delete(*key_list))
        except RedisError as e:
            raise CacheError(f"Failed to delete {len(key_list)} cache keys: {e}") from e

    async def clear(self) -> None:
        try:
            async for key in self.redis_client.scan_iter(match=CacheKeys.USER_PERMISSIONS.format(user_id="*")):
                await self.redis_client.delete(key)
        except RedisError as e:
            raise CacheError(f"Failed to clear permission cache: {e}") from e

    async def close(self) -> None:
        await self.redis_client.aclose()
