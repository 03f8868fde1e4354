"""Team administration.

Membership changes invalidate only the joining or leaving user. Role changes
on a team, and team deletion, invalidate every current member.
"""

import logging
import uuid
from typing import List, Optional, Set

from ....core.exceptions import RoleNotFoundError, TeamNotFoundError, ValidationError
from ...invalidation.services.invalidator import PermissionInvalidator
from ...permissions.entities import PermissionRepository, Role
from ..entities import Team


logger = logging.getLogger(__name__)


class TeamService:
    """Manages teams, their members and their roles."""

    def __init__(self, repository: PermissionRepository, invalidator: PermissionInvalidator):
        self.repository = repository
        self.invalidator = invalidator

    async def _require_team(self, team_id: str) -> Team:
        team = await self.repository.get_team(team_id)
        if team is None:
            raise TeamNotFoundError(f"Team {team_id} not found", details={"team_id": team_id})
        return team

    async def _require_role(self, role_id: str) -> Role:
        role = await self.repository.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found", details={"role_id": role_id})
        return role

    # Teams

    async def create_team(self, tenant_id: str, name: str, description: Optional[str] = None) -> Team:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Team name cannot be empty")
        team = await self.repository.create_team(
            Team(id=str(uuid.uuid4()), tenant_id=tenant_id, name=name, description=description)
        )
        logger.info(f"Created team {team.id} '{name}' for tenant {tenant_id}")
        return team

    async def update_team(
        self,
        team_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Team:
        team = await self._require_team(team_id)
        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Team name cannot be empty")
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        return await self.repository.update_team(team.with_changes(**changes))

    async def delete_team(self, team_id: str) -> Set[str]:
        """Delete a team and invalidate its former members."""
        await self._require_team(team_id)
        members = await self.invalidator.team_members(team_id)
        await self.repository.delete_team(team_id)
        await self.invalidator.invalidate_users(members, reason=f"team {team_id} deleted")
        logger.info(f"Deleted team {team_id}; invalidated {len(members)} member(s)")
        return members

    async def get_team(self, team_id: str) -> Team:
        return await self._require_team(team_id)

    async def list_teams(self, tenant_id: str) -> List[Team]:
        return await self.repository.list_teams(tenant_id)

    async def list_members(self, team_id: str) -> List[str]:
        await self._require_team(team_id)
        return sorted(await self.repository.get_team_member_ids(team_id))

    async def list_team_roles(self, team_id: str) -> List[Role]:
        await self._require_team(team_id)
        roles = []
        for role_id in sorted(await self.repository.get_team_role_ids(team_id)):
            role = await self.repository.get_role(role_id)
            if role is not None:
                roles.append(role)
        return roles

    # Membership

    async def add_team_member(self, team_id: str, user_id: str) -> bool:
        """Add a user to a team. Returns False when already a member."""
        await self._require_team(team_id)
        added = await self.repository.add_team_member(team_id, user_id)
        await self.invalidator.invalidate_users([user_id], reason=f"joined team {team_id}")
        if added:
            logger.info(f"Added user {user_id} to team {team_id}")
        return added

    async def remove_team_member(self, team_id: str, user_id: str) -> bool:
        """Remove a user from a team. Returns False when not a member."""
        removed = await self.repository.remove_team_member(team_id, user_id)
        await self.invalidator.invalidate_users([user_id], reason=f"left team {team_id}")
        if removed:
            logger.info(f"Removed user {user_id} from team {team_id}")
        return removed

    # Team roles

    async def assign_role_to_team(self, team_id: str, role_id: str) -> bool:
        """Link a role to a team. Returns False when already linked."""
        await self._require_team(team_id)
        await self._require_role(role_id)
        added = await self.repository.add_team_role(team_id, role_id)
        members = await self.invalidator.invalidate_team(team_id, reason=f"role {role_id} assigned to team")
        if added:
            logger.info(f"Assigned role {role_id} to team {team_id}; invalidated {len(members)} member(s)")
        return added

    async def remove_role_from_team(self, team_id: str, role_id: str) -> bool:
        """Unlink a role from a team. Returns False when not linked."""
        removed = await self.repository.remove_team_role(team_id, role_id)
        members = await self.invalidator.invalidate_team(team_id, reason=f"role {role_id} removed from team")
        if removed:
            logger.info(f"Removed role {role_id} from team {team_id}; invalidated {len(members)} member(s)")
        return removed
