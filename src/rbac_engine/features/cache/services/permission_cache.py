"""Permission cache service.

Caches each user's effective permission set under ``perm:user:{user_id}``
with a TTL. The cache fails open: a backend error is logged and treated as a
miss, so authorization falls through to a fresh computation instead of
failing the request.
"""

import json
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, Optional

from ....config.constants import CacheKeys, CacheTTL
from ....core.exceptions import CacheError
from ..entities.protocols import CacheBackend


logger = logging.getLogger(__name__)

# Errors a backend may leak besides CacheError (dropped sockets, bad payloads)
BACKEND_ERRORS = (CacheError, ConnectionError, OSError, ValueError)


class PermissionCache:
    """TTL cache of effective permission sets keyed by user ID."""

    def __init__(self, backend: CacheBackend, ttl_seconds: int = CacheTTL.PERMISSIONS_DEFAULT):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self._stats: Dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "deletes": 0,
            "errors": 0,
        }

    @staticmethod
    def key_for(user_id: str) -> str:
        return CacheKeys.USER_PERMISSIONS.format(user_id=user_id)

    @staticmethod
    def _serialize(permissions: Iterable[str]) -> bytes:
        return json.dumps(sorted(permissions)).encode("utf-8")

    @staticmethod
    def _deserialize(raw: bytes) -> FrozenSet[str]:
        codes = json.loads(raw)
        if not isinstance(codes, list):
            raise ValueError("cached permission set is not a list")
        return frozenset(codes)

    async def get(self, user_id: str) -> Optional[FrozenSet[str]]:
        """Return the cached set, or None on a miss or backend failure."""
        key = self.key_for(user_id)
        try:
            raw = await self.backend.get(key)
            if raw is None:
                self._stats["misses"] += 1
                return None
            permissions = self._deserialize(raw)
        except BACKEND_ERRORS as e:
            self._stats["errors"] += 1
            self._stats["misses"] += 1
            logger.warning(f"Permission cache read failed for {key}, treating as miss: {e}")
            return None
        self._stats["hits"] += 1
        return permissions

    async def set(
        self,
        user_id: str,
        permissions: Iterable[str],
        ttl_seconds: Optional[int] = None,
    ) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds
        elif ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        key = self.key_for(user_id)
        try:
            await self.backend.set(key, self._serialize(permissions), ttl_seconds)
            self._stats["sets"] += 1
        except BACKEND_ERRORS as e:
            self._stats["errors"] += 1
            logger.warning(f"Permission cache write failed for {key}: {e}")

    async def delete(self, user_id: str) -> None:
        key = self.key_for(user_id)
        try:
            await self.backend.delete(key)
            self._stats["deletes"] += 1
        except BACKEND_ERRORS as e:
            self._stats["errors"] += 1
            logger.warning(f"Permission cache delete failed for {key}: {e}")

    async def delete_many(self, user_ids: Iterable[str]) -> None:
        keys = [self.key_for(user_id) for user_id in set(user_ids)]
        if not keys:
            return
        try:
            await self.backend.delete_many(keys)
            self._stats["deletes"] += len(keys)
        except BACKEND_ERRORS as e:
            self._stats["errors"] += 1
            logger.warning(f"Permission cache delete failed for {len(keys)} users: {e}")

    async def get_or_compute(
        self,
        user_id: str,
        compute: Callable[[str], Awaitable[FrozenSet[str]]],
    ) -> FrozenSet[str]:
        """Return the cached set, computing and storing it on a miss.

        Errors raised by ``compute`` propagate and nothing is stored.
        """
        cached = await self.get(user_id)
        if cached is not None:
            return cached
        permissions = frozenset(await compute(user_id))
        await self.set(user_id, permissions)
        return permissions

    async def clear(self) -> None:
        try:
            await self.backend.clear()
        except BACKEND_ERRORS as e:
            self._stats["errors"] += 1
            logger.warning(f"Permission cache clear failed: {e}")

    def stats(self) -> Dict[str, int]:
        return dict(self._stats)
