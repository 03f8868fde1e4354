"""Permissions feature.

Feature-first layout:
- entities/: permission, role and assignment records plus the repository protocol
- repositories/: in-memory and asyncpg implementations
- services/: calculator, authorization facade and administration services
"""

from .entities import (
    Permission,
    PermissionBreakdown,
    PermissionCode,
    PermissionRepository,
    Role,
    UserPermissionOverride,
    UserRole,
)

__all__ = [
    "Permission",
    "PermissionBreakdown",
    "PermissionCode",
    "PermissionRepository",
    "Role",
    "UserPermissionOverride",
    "UserRole",
]
