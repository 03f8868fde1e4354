"""API request and response models."""

from .request import (
    OverrideRequest,
    RoleCreateRequest,
    RoleDeleteRequest,
    RoleUpdateRequest,
    TeamCreateRequest,
    TeamMemberRequest,
    TeamRoleRequest,
    TeamUpdateRequest,
    UserRoleRequest,
)
from .response import (
    AssignmentResponse,
    HealthResponse,
    OverrideResponse,
    PermissionBreakdownResponse,
    PermissionResponse,
    RoleDeleteResponse,
    RoleResponse,
    TeamMembersResponse,
    TeamResponse,
    UserPermissionsResponse,
)

__all__ = [
    "OverrideRequest",
    "RoleCreateRequest",
    "RoleDeleteRequest",
    "RoleUpdateRequest",
    "TeamCreateRequest",
    "TeamMemberRequest",
    "TeamRoleRequest",
    "TeamUpdateRequest",
    "UserRoleRequest",
    "AssignmentResponse",
    "HealthResponse",
    "OverrideResponse",
    "PermissionBreakdownResponse",
    "PermissionResponse",
    "RoleDeleteResponse",
    "RoleResponse",
    "TeamMembersResponse",
    "TeamResponse",
    "UserPermissionsResponse",
]
