"""Authorization facade used by request handlers.

Every check performs one effective-set lookup through the permission cache.
When the store cannot answer in time the facade fails closed by raising
StorageUnavailableError; it never grants access on an error path.
"""

import asyncio
import logging
from typing import FrozenSet, Iterable, Optional

from ....core.exceptions import PermissionDeniedError, StorageError, StorageUnavailableError
from ...cache.services.permission_cache import PermissionCache
from .calculator import EffectivePermissionCalculator


logger = logging.getLogger(__name__)


class AuthorizationService:
    """Answers permission checks for a user."""

    def __init__(
        self,
        calculator: EffectivePermissionCalculator,
        cache: PermissionCache,
        timeout_seconds: float = 5.0,
    ):
        self.calculator = calculator
        self.cache = cache
        self.timeout_seconds = timeout_seconds

    async def _compute(self, user_id: str, timeout: Optional[float]) -> FrozenSet[str]:
        limit = timeout if timeout is not None else self.timeout_seconds
        try:
            return await asyncio.wait_for(
                self.calculator.compute_effective_permissions(user_id), timeout=limit
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Permission lookup for user {user_id} timed out after {limit}s")
            raise StorageUnavailableError(
                "Permission store did not respond in time",
                details={"timeout_seconds": limit},
            ) from e
        except StorageUnavailableError:
            raise
        except StorageError as e:
            logger.error(f"Permission lookup for user {user_id} failed: {e}")
            raise StorageUnavailableError(f"Permission store unavailable: {e.message}") from e

    async def get_effective_permissions(
        self,
        user_id: str,
        timeout: Optional[float] = None,
    ) -> FrozenSet[str]:
        return await self.cache.get_or_compute(
            user_id, lambda uid: self._compute(uid, timeout)
        )

    async def has_permission(self, user_id: str, permission_code: str, timeout: Optional[float] = None) -> bool:
        permissions = await self.get_effective_permissions(user_id, timeout)
        return permission_code in permissions

    async def has_any(self, user_id: str, permission_codes: Iterable[str], timeout: Optional[float] = None) -> bool:
        """True if the user holds at least one code; False for an empty list."""
        codes = list(permission_codes)
        if not codes:
            return False
        permissions = await self.get_effective_permissions(user_id, timeout)
        return any(code in permissions for code in codes)

    async def has_all(self, user_id: str, permission_codes: Iterable[str], timeout: Optional[float] = None) -> bool:
        """True if the user holds every code; True for an empty list."""
        codes = list(permission_codes)
        if not codes:
            return True
        permissions = await self.get_effective_permissions(user_id, timeout)
        return all(code in permissions for code in codes)

    async def require(
        self,
        user_id: str,
        permission_codes: Iterable[str],
        require_all: bool = False,
    ) -> None:
        """Raise PermissionDeniedError unless the check passes."""
        codes = list(permission_codes)
        check = self.has_all if require_all else self.has_any
        if not await check(user_id, codes):
            logger.info(f"Permission denied for user {user_id}: requires {codes}")
            raise PermissionDeniedError(codes)
