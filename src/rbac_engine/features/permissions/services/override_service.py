"""Per-user permission overrides."""

import logging
from typing import List, Optional

from ....config.constants import is_valid_permission
from ....core.exceptions import InvalidPermissionCodeError
from ...invalidation.services.invalidator import PermissionInvalidator
from ..entities import Permission, PermissionRepository, UserPermissionOverride


logger = logging.getLogger(__name__)


class OverrideService:
    """Sets and removes force-grant/force-deny overrides for single users."""

    def __init__(self, repository: PermissionRepository, invalidator: PermissionInvalidator):
        self.repository = repository
        self.invalidator = invalidator

    async def _resolve_permission(self, permission_code: str) -> Permission:
        if not is_valid_permission(permission_code):
            raise InvalidPermissionCodeError([permission_code])
        permissions = await self.repository.get_permissions_by_codes([permission_code])
        if not permissions:
            raise InvalidPermissionCodeError(
                [permission_code], message=f"Permission code is not registered: {permission_code}"
            )
        return permissions[0]

    async def set_user_permission_override(
        self,
        user_id: str,
        permission_code: str,
        allow: bool,
        created_by: Optional[str] = None,
    ) -> UserPermissionOverride:
        """Create or replace the user's override for ``permission_code``."""
        permission = await self._resolve_permission(permission_code)
        override = await self.repository.upsert_override(
            UserPermissionOverride(
                user_id=user_id,
                permission_id=permission.id,
                permission_code=permission.code,
                allow=allow,
                created_by=created_by,
            )
        )
        await self.invalidator.invalidate_users([user_id], reason=f"override {permission_code} set")
        logger.info(
            f"Set override {'allow' if allow else 'deny'} {permission_code} "
            f"for user {user_id} (by {created_by})"
        )
        return override

    async def remove_user_permission_override(self, user_id: str, permission_code: str) -> bool:
        """Delete the user's override for ``permission_code``.

        Returns False when the user had no such override.
        """
        permission = await self._resolve_permission(permission_code)
        removed = await self.repository.delete_override(user_id, permission.id)
        await self.invalidator.invalidate_users([user_id], reason=f"override {permission_code} removed")
        if removed:
            logger.info(f"Removed override {permission_code} for user {user_id}")
        return removed

    async def list_user_overrides(self, user_id: str) -> List[UserPermissionOverride]:
        return await self.repository.get_user_overrides(user_id)
