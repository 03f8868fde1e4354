"""Protocol interfaces for the permission store.

One repository protocol covers every RBAC table. The calculator only uses
the read methods; administration services use the rest. Implementations
must make each write method atomic.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, Sequence, Set, runtime_checkable

from ...teams.entities.team import Team
from .assignments import UserPermissionOverride, UserRole
from .permission import Permission
from .role import Role


@runtime_checkable
class PermissionRepository(Protocol):
    """Protocol for RBAC data access operations."""

    # Permissions

    @abstractmethod
    async def list_permissions(self) -> List[Permission]:
        """List all stored permissions ordered by code."""
        ...

    @abstractmethod
    async def get_permissions_by_codes(self, codes: Sequence[str]) -> List[Permission]:
        """Get stored permissions for the given codes; unknown codes are skipped."""
        ...

    @abstractmethod
    async def upsert_permissions(self, permissions: Sequence[Permission]) -> int:
        """Insert permissions whose code is not stored yet; return how many were added."""
        ...

    # Calculator reads

    @abstractmethod
    async def get_user_role_ids(self, user_id: str) -> Set[str]:
        """Role IDs granted to the user directly."""
        ...

    @abstractmethod
    async def get_user_team_role_ids(self, user_id: str) -> Set[str]:
        """Role IDs linked to any team the user is a member of."""
        ...

    @abstractmethod
    async def get_role_permission_codes(self, role_ids: Sequence[str]) -> Set[str]:
        """Union of permission codes linked to the given roles."""
        ...

    @abstractmethod
    async def get_user_overrides(self, user_id: str) -> List[UserPermissionOverride]:
        """All permission overrides of the user."""
        ...

    # Roles

    @abstractmethod
    async def get_role(self, role_id: str) -> Optional[Role]:
        ...

    @abstractmethod
    async def get_role_by_name(self, tenant_id: Optional[str], name: str) -> Optional[Role]:
        ...

    @abstractmethod
    async def list_roles(self, tenant_id: Optional[str]) -> List[Role]:
        """Roles of the tenant plus global roles."""
        ...

    @abstractmethod
    async def create_role(self, role: Role, permission_ids: Sequence[str]) -> Role:
        """Insert a role and its permission links in one transaction."""
        ...

    @abstractmethod
    async def update_role(self, role: Role, permission_ids: Optional[Sequence[str]] = None) -> Role:
        """Update role fields; when ``permission_ids`` is given, replace all links."""
        ...

    @abstractmethod
    async def delete_role(self, role_id: str, reassign_to: Optional[str] = None) -> None:
        """Delete a role and its links, first migrating user grants to ``reassign_to``."""
        ...

    @abstractmethod
    async def get_role_user_ids(self, role_id: str) -> Set[str]:
        """Users holding the role directly."""
        ...

    @abstractmethod
    async def get_role_team_member_ids(self, role_id: str) -> Set[str]:
        """Members of every team the role is linked to."""
        ...

    @abstractmethod
    async def add_user_role(self, user_role: UserRole) -> bool:
        """Grant a role; return False if the user already holds it."""
        ...

    @abstractmethod
    async def remove_user_role(self, user_id: str, role_id: str) -> bool:
        """Revoke a role; return False if the user did not hold it."""
        ...

    # Teams

    @abstractmethod
    async def get_team(self, team_id: str) -> Optional[Team]:
        ...

    @abstractmethod
    async def list_teams(self, tenant_id: str) -> List[Team]:
        ...

    @abstractmethod
    async def create_team(self, team: Team) -> Team:
        ...

    @abstractmethod
    async def update_team(self, team: Team) -> Team:
        ...

    @abstractmethod
    async def delete_team(self, team_id: str) -> bool:
        """Delete a team with its member and role links."""
        ...

    @abstractmethod
    async def get_team_member_ids(self, team_id: str) -> Set[str]:
        ...

    @abstractmethod
    async def get_team_role_ids(self, team_id: str) -> Set[str]:
        ...

    @abstractmethod
    async def add_team_member(self, team_id: str, user_id: str) -> bool:
        ...

    @abstractmethod
    async def remove_team_member(self, team_id: str, user_id: str) -> bool:
        ...

    @abstractmethod
    async def add_team_role(self, team_id: str, role_id: str) -> bool:
        ...

    @abstractmethod
    async def remove_team_role(self, team_id: str, role_id: str) -> bool:
        ...

    # Overrides

    @abstractmethod
    async def upsert_override(self, override: UserPermissionOverride) -> UserPermissionOverride:
        """Insert or replace the override for (user_id, permission_id)."""
        ...

    @abstractmethod
    async def delete_override(self, user_id: str, permission_id: str) -> bool:
        ...
