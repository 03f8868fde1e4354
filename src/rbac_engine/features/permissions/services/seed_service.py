"""Seeding of the permission vocabulary and default tenant roles."""

import logging
import uuid
from typing import Dict, List, Optional

from ....config.constants import (
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_CATEGORIES,
    PERMISSION_DESCRIPTIONS,
    PERMISSION_VOCABULARY_VERSION,
)
from ..entities import Permission, PermissionRepository, Role
from .role_service import RoleService


logger = logging.getLogger(__name__)


class SeedService:
    """Idempotent bootstrap of the RBAC tables."""

    def __init__(self, repository: PermissionRepository, role_service: RoleService):
        self.repository = repository
        self.role_service = role_service

    async def seed_permissions(self) -> int:
        """Insert every vocabulary code not stored yet; return how many were added."""
        permissions: List[Permission] = [
            Permission(
                id=str(uuid.uuid4()),
                code=code,
                category=category.value,
                description=PERMISSION_DESCRIPTIONS.get(code),
            )
            for category, codes in PERMISSION_CATEGORIES.items()
            for code in codes
        ]
        added = await self.repository.upsert_permissions(permissions)
        logger.info(
            f"Seeded permission vocabulary v{PERMISSION_VOCABULARY_VERSION}: "
            f"{added} new of {len(permissions)}"
        )
        return added

    async def seed_default_roles(self, tenant_id: Optional[str]) -> Dict[str, Role]:
        """Create the default role bundles for a tenant, skipping existing names.

        Returns:
            Mapping of role name to the created or already existing role
        """
        roles: Dict[str, Role] = {}
        for name, codes in DEFAULT_ROLE_PERMISSIONS.items():
            existing = await self.repository.get_role_by_name(tenant_id, name)
            if existing is not None:
                roles[name] = existing
                continue
            roles[name] = await self.role_service.create_role(
                tenant_id=tenant_id,
                name=name,
                description=f"Default {name} role",
                permission_codes=codes,
                is_system_default=True,
            )
        logger.info(f"Seeded default roles for tenant {tenant_id}")
        return roles
