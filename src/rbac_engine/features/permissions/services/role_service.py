"""Role administration.

Every mutation that changes who holds which permission ends with the
affected users being invalidated through the PermissionInvalidator.
"""

import logging
import uuid
from typing import Iterable, List, Optional, Sequence, Set

from ....config.constants import is_valid_permission
from ....core.exceptions import (
    ConflictError,
    InvalidPermissionCodeError,
    RoleInUseError,
    RoleNotFoundError,
    ValidationError,
)
from ...invalidation.services.invalidator import PermissionInvalidator
from ..entities import Permission, PermissionRepository, Role, UserRole


logger = logging.getLogger(__name__)


class RoleService:
    """Creates, updates, deletes and assigns roles."""

    def __init__(self, repository: PermissionRepository, invalidator: PermissionInvalidator):
        self.repository = repository
        self.invalidator = invalidator

    async def resolve_permission_ids(self, permission_codes: Iterable[str]) -> List[str]:
        """Map codes to stored permission IDs.

        Raises:
            InvalidPermissionCodeError: if any code is outside the vocabulary
                or has not been seeded into the store
        """
        codes = list(dict.fromkeys(permission_codes))
        unknown = [code for code in codes if not is_valid_permission(code)]
        if unknown:
            raise InvalidPermissionCodeError(unknown)

        permissions = await self.repository.get_permissions_by_codes(codes)
        found = {p.code for p in permissions}
        missing = [code for code in codes if code not in found]
        if missing:
            raise InvalidPermissionCodeError(
                missing, message=f"Permission codes are not registered: {', '.join(sorted(missing))}"
            )
        return [p.id for p in permissions]

    async def _require_role(self, role_id: str) -> Role:
        role = await self.repository.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found", details={"role_id": role_id})
        return role

    async def _ensure_name_available(self, tenant_id: Optional[str], name: str, role_id: Optional[str] = None) -> None:
        existing = await self.repository.get_role_by_name(tenant_id, name)
        if existing is not None and existing.id != role_id:
            raise ConflictError(
                f"Role '{name}' already exists",
                details={"tenant_id": tenant_id, "name": name, "role_id": existing.id},
            )

    # Queries

    async def get_role(self, role_id: str) -> Role:
        return await self._require_role(role_id)

    async def list_roles(self, tenant_id: Optional[str]) -> List[Role]:
        """Roles of the tenant plus global roles, each with its permission codes."""
        return await self.repository.list_roles(tenant_id)

    async def list_permissions(self) -> List[Permission]:
        return await self.repository.list_permissions()

    # Mutations

    async def create_role(
        self,
        tenant_id: Optional[str],
        name: str,
        description: Optional[str],
        permission_codes: Sequence[str],
        is_system_default: bool = False,
    ) -> Role:
        """Create a role with its permission links.

        Nobody holds a new role yet, so nothing is invalidated.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name cannot be empty")

        permission_ids = await self.resolve_permission_ids(permission_codes)
        await self._ensure_name_available(tenant_id, name)

        role = Role(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            name=name,
            description=description,
            is_system_default=is_system_default,
        )
        created = await self.repository.create_role(role, permission_ids)
        logger.info(f"Created role {created.id} '{name}' for tenant {tenant_id}")
        return created

    async def update_role(
        self,
        role_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        permission_codes: Optional[Sequence[str]] = None,
    ) -> Role:
        """Update fields and, when codes are given, replace all permission links."""
        role = await self._require_role(role_id)

        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Role name cannot be empty")
            if name != role.name:
                await self._ensure_name_available(role.tenant_id, name, role_id)
            changes["name"] = name
        if description is not None:
            changes["description"] = description

        permission_ids = None
        if permission_codes is not None:
            permission_ids = await self.resolve_permission_ids(permission_codes)

        affected: Set[str] = set()
        if permission_ids is not None:
            affected = await self.invalidator.users_with_role(role_id)

        updated = await self.repository.update_role(role.with_changes(**changes), permission_ids)

        if permission_ids is not None:
            await self.invalidator.invalidate_users(affected, reason=f"role {role_id} updated")
            logger.info(
                f"Updated permissions of role {role_id}; invalidated {len(affected)} user(s)"
            )
        return updated

    async def delete_role(self, role_id: str, force_reassign_to: Optional[str] = None) -> Set[str]:
        """Delete a role, migrating user grants to ``force_reassign_to`` first.

        Returns:
            IDs of users whose permissions were invalidated

        Raises:
            RoleInUseError: if users hold the role and no replacement is given
        """
        await self._require_role(role_id)

        holders = await self.repository.get_role_user_ids(role_id)
        if force_reassign_to is not None:
            if force_reassign_to == role_id:
                raise ValidationError(
                    "Replacement role must differ from the role being deleted",
                    details={"role_id": role_id},
                )
            await self._require_role(force_reassign_to)
        elif holders:
            raise RoleInUseError(role_id, holders)

        affected = await self.invalidator.users_with_role(role_id)
        await self.repository.delete_role(role_id, reassign_to=force_reassign_to)
        await self.invalidator.invalidate_users(affected, reason=f"role {role_id} deleted")

        logger.info(
            f"Deleted role {role_id}; reassigned {len(holders)} user(s) to "
            f"{force_reassign_to}; invalidated {len(affected)} user(s)"
        )
        return affected

    async def assign_role_to_user(self, user_id: str, role_id: str, assigned_by: Optional[str] = None) -> bool:
        """Grant a role. Returns False when the user already held it."""
        await self._require_role(role_id)
        added = await self.repository.add_user_role(
            UserRole(user_id=user_id, role_id=role_id, assigned_by=assigned_by)
        )
        await self.invalidator.invalidate_users([user_id], reason=f"role {role_id} assigned")
        if added:
            logger.info(f"Assigned role {role_id} to user {user_id} (by {assigned_by})")
        return added

    async def revoke_role_from_user(self, user_id: str, role_id: str) -> bool:
        """Revoke a role. Returns False when the user did not hold it."""
        removed = await self.repository.remove_user_role(user_id, role_id)
        await self.invalidator.invalidate_users([user_id], reason=f"role {role_id} revoked")
        if removed:
            logger.info(f"Revoked role {role_id} from user {user_id}")
        return removed
