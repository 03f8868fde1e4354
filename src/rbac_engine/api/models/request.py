"""Request models for the admin API."""

from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class RoleCreateRequest(CamelModel):
    """Request model for creating a role."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permission_codes: List[str] = Field(default_factory=list)


class RoleUpdateRequest(CamelModel):
    """Request model for updating a role; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permission_codes: Optional[List[str]] = None


class RoleDeleteRequest(CamelModel):
    force_reassign_to: Optional[str] = Field(
        None, description="Role that current holders are moved to before deletion"
    )


class UserRoleRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class TeamCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class TeamUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class TeamMemberRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class TeamRoleRequest(CamelModel):
    role_id: str = Field(..., min_length=1)


class OverrideRequest(CamelModel):
    """Force-grant (``allow=true``) or force-deny (``allow=false``) one permission."""

    permission_code: str = Field(..., min_length=1)
    allow: bool
