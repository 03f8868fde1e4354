"""Response models for the admin API."""

from datetime import datetime
from typing import Dict, List, Optional

from .base import CamelModel
from ...features.permissions.entities import (
    Permission,
    PermissionBreakdown,
    Role,
    UserPermissionOverride,
)
from ...features.teams.entities import Team


class PermissionResponse(CamelModel):
    id: str
    code: str
    category: str
    description: Optional[str] = None

    @classmethod
    def from_entity(cls, permission: Permission) -> "PermissionResponse":
        return cls(
            id=permission.id,
            code=permission.code,
            category=permission.category,
            description=permission.description,
        )


class RoleResponse(CamelModel):
    id: str
    tenant_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    is_system_default: bool
    permission_codes: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, role: Role) -> "RoleResponse":
        return cls(
            id=role.id,
            tenant_id=role.tenant_id,
            name=role.name,
            description=role.description,
            is_system_default=role.is_system_default,
            permission_codes=sorted(role.permission_codes),
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class RoleDeleteResponse(CamelModel):
    role_id: str
    reassigned_to: Optional[str] = None
    invalidated_users: int


class AssignmentResponse(CamelModel):
    """Outcome of an idempotent link/unlink call."""

    changed: bool


class TeamResponse(CamelModel):
    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, team: Team) -> "TeamResponse":
        return cls(
            id=team.id,
            tenant_id=team.tenant_id,
            name=team.name,
            description=team.description,
            created_at=team.created_at,
            updated_at=team.updated_at,
        )


class TeamMembersResponse(CamelModel):
    team_id: str
    user_ids: List[str]


class UserPermissionsResponse(CamelModel):
    user_id: str
    permissions: List[str]


class PermissionBreakdownResponse(CamelModel):
    user_id: str
    permissions: List[str]
    direct_role_ids: List[str]
    team_role_ids: List[str]
    granted: List[str]
    allowed_overrides: List[str]
    denied_overrides: List[str]

    @classmethod
    def from_entity(cls, breakdown: PermissionBreakdown) -> "PermissionBreakdownResponse":
        return cls(
            user_id=breakdown.user_id,
            permissions=sorted(breakdown.effective),
            direct_role_ids=sorted(breakdown.direct_role_ids),
            team_role_ids=sorted(breakdown.team_role_ids),
            granted=sorted(breakdown.granted),
            allowed_overrides=sorted(breakdown.allowed_overrides),
            denied_overrides=sorted(breakdown.denied_overrides),
        )


class OverrideResponse(CamelModel):
    user_id: str
    permission_code: str
    allow: bool
    created_by: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, override: UserPermissionOverride) -> "OverrideResponse":
        return cls(
            user_id=override.user_id,
            permission_code=override.permission_code,
            allow=override.allow,
            created_by=override.created_by,
            created_at=override.created_at,
        )


class HealthResponse(CamelModel):
    status: str
    node_id: str
    cache: Dict[str, int]
