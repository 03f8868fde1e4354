"""Permission entities and repository protocol."""

from .assignments import PermissionBreakdown, UserPermissionOverride, UserRole
from .permission import Permission, PermissionCode
from .protocols import PermissionRepository
from .role import Role

__all__ = [
    "Permission",
    "PermissionCode",
    "Role",
    "UserRole",
    "UserPermissionOverride",
    "PermissionBreakdown",
    "PermissionRepository",
]
