"""In-memory permission repository.

Used by tests and single-process deployments. Every method body runs without
awaiting, so each call is atomic with respect to other coroutines on the same
event loop.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ....core.clock import utc_now
from ....core.exceptions import ConflictError, RoleNotFoundError, TeamNotFoundError
from ...teams.entities.team import Team, TeamMember, TeamRole
from ..entities import Permission, Role, UserPermissionOverride, UserRole


logger = logging.getLogger(__name__)


class InMemoryPermissionRepository:
    """Dictionary-backed implementation of PermissionRepository."""

    def __init__(self):
        self._permissions: Dict[str, Permission] = {}
        self._permission_ids_by_code: Dict[str, str] = {}
        self._roles: Dict[str, Role] = {}
        self._role_permissions: Dict[str, Set[str]] = {}
        self._user_roles: Dict[Tuple[str, str], UserRole] = {}
        self._teams: Dict[str, Team] = {}
        self._team_members: Dict[Tuple[str, str], TeamMember] = {}
        self._team_roles: Dict[Tuple[str, str], TeamRole] = {}
        self._overrides: Dict[Tuple[str, str], UserPermissionOverride] = {}

    # Permissions

    async def list_permissions(self) -> List[Permission]:
        return sorted(self._permissions.values(), key=lambda p: p.code)

    async def get_permissions_by_codes(self, codes: Sequence[str]) -> List[Permission]:
        result = []
        for code in dict.fromkeys(codes):
            permission_id = self._permission_ids_by_code.get(code)
            if permission_id is not None:
                result.append(self._permissions[permission_id])
        return result

    async def upsert_permissions(self, permissions: Sequence[Permission]) -> int:
        added = 0
        for permission in permissions:
            if permission.code in self._permission_ids_by_code:
                continue
            self._permissions[permission.id] = permission
            self._permission_ids_by_code[permission.code] = permission.id
            added += 1
        return added

    # Calculator reads

    async def get_user_role_ids(self, user_id: str) -> Set[str]:
        return {role_id for (uid, role_id) in self._user_roles if uid == user_id}

    async def get_user_team_role_ids(self, user_id: str) -> Set[str]:
        team_ids = {team_id for (team_id, uid) in self._team_members if uid == user_id}
        return {role_id for (team_id, role_id) in self._team_roles if team_id in team_ids}

    async def get_role_permission_codes(self, role_ids: Sequence[str]) -> Set[str]:
        codes: Set[str] = set()
        for role_id in role_ids:
            for permission_id in self._role_permissions.get(role_id, ()):
                codes.add(self._permissions[permission_id].code)
        return codes

    async def get_user_overrides(self, user_id: str) -> List[UserPermissionOverride]:
        return [o for (uid, _), o in self._overrides.items() if uid == user_id]

    # Roles

    def _with_codes(self, role: Role) -> Role:
        codes = frozenset(
            self._permissions[pid].code for pid in self._role_permissions.get(role.id, ())
        )
        return replace(role, permission_codes=codes)

    def _check_unique_name(self, role: Role) -> None:
        for existing in self._roles.values():
            if (
                existing.id != role.id
                and existing.tenant_id == role.tenant_id
                and existing.name == role.name
            ):
                raise ConflictError(
                    f"Role '{role.name}' already exists",
                    details={"tenant_id": role.tenant_id, "name": role.name},
                )

    async def get_role(self, role_id: str) -> Optional[Role]:
        role = self._roles.get(role_id)
        return self._with_codes(role) if role else None

    async def get_role_by_name(self, tenant_id: Optional[str], name: str) -> Optional[Role]:
        for role in self._roles.values():
            if role.tenant_id == tenant_id and role.name == name:
                return self._with_codes(role)
        return None

    async def list_roles(self, tenant_id: Optional[str]) -> List[Role]:
        roles = [
            self._with_codes(r) for r in self._roles.values()
            if r.tenant_id is None or r.tenant_id == tenant_id
        ]
        return sorted(roles, key=lambda r: (r.tenant_id is not None, r.name))

    async def create_role(self, role: Role, permission_ids: Sequence[str]) -> Role:
        if role.id in self._roles:
            raise ConflictError(f"Role {role.id} already exists")
        self._check_unique_name(role)
        self._roles[role.id] = role
        self._role_permissions[role.id] = set(permission_ids)
        return self._with_codes(role)

    async def update_role(self, role: Role, permission_ids: Optional[Sequence[str]] = None) -> Role:
        if role.id not in self._roles:
            raise RoleNotFoundError(f"Role {role.id} not found")
        self._check_unique_name(role)
        self._roles[role.id] = role
        if permission_ids is not None:
            self._role_permissions[role.id] = set(permission_ids)
        return self._with_codes(role)

    async def delete_role(self, role_id: str, reassign_to: Optional[str] = None) -> None:
        if role_id not in self._roles:
            raise RoleNotFoundError(f"Role {role_id} not found")
        if reassign_to is not None and reassign_to not in self._roles:
            raise RoleNotFoundError(f"Role {reassign_to} not found")

        for (user_id, rid), user_role in list(self._user_roles.items()):
            if rid != role_id:
                continue
            del self._user_roles[(user_id, rid)]
            if reassign_to is not None and (user_id, reassign_to) not in self._user_roles:
                self._user_roles[(user_id, reassign_to)] = replace(
                    user_role, role_id=reassign_to, assigned_at=utc_now()
                )

        for key in [k for k in self._team_roles if k[1] == role_id]:
            del self._team_roles[key]
        self._role_permissions.pop(role_id, None)
        del self._roles[role_id]

    async def get_role_user_ids(self, role_id: str) -> Set[str]:
        return {uid for (uid, rid) in self._user_roles if rid == role_id}

    async def get_role_team_member_ids(self, role_id: str) -> Set[str]:
        team_ids = {tid for (tid, rid) in self._team_roles if rid == role_id}
        return {uid for (tid, uid) in self._team_members if tid in team_ids}

    async def add_user_role(self, user_role: UserRole) -> bool:
        if user_role.role_id not in self._roles:
            raise RoleNotFoundError(f"Role {user_role.role_id} not found")
        key = (user_role.user_id, user_role.role_id)
        if key in self._user_roles:
            return False
        self._user_roles[key] = user_role
        return True

    async def remove_user_role(self, user_id: str, role_id: str) -> bool:
        return self._user_roles.pop((user_id, role_id), None) is not None

    # Teams

    async def get_team(self, team_id: str) -> Optional[Team]:
        return self._teams.get(team_id)

    async def list_teams(self, tenant_id: str) -> List[Team]:
        return sorted(
            (t for t in self._teams.values() if t.tenant_id == tenant_id),
            key=lambda t: t.name,
        )

    async def create_team(self, team: Team) -> Team:
        if team.id in self._teams:
            raise ConflictError(f"Team {team.id} already exists")
        self._teams[team.id] = team
        return team

    async def update_team(self, team: Team) -> Team:
        if team.id not in self._teams:
            raise TeamNotFoundError(f"Team {team.id} not found")
        self._teams[team.id] = team
        return team

    async def delete_team(self, team_id: str) -> bool:
        if self._teams.pop(team_id, None) is None:
            return False
        for key in [k for k in self._team_members if k[0] == team_id]:
            del self._team_members[key]
        for key in [k for k in self._team_roles if k[0] == team_id]:
            del self._team_roles[key]
        return True

    async def get_team_member_ids(self, team_id: str) -> Set[str]:
        return {uid for (tid, uid) in self._team_members if tid == team_id}

    async def get_team_role_ids(self, team_id: str) -> Set[str]:
        return {rid for (tid, rid) in self._team_roles if tid == team_id}

    async def add_team_member(self, team_id: str, user_id: str) -> bool:
        if team_id not in self._teams:
            raise TeamNotFoundError(f"Team {team_id} not found")
        key = (team_id, user_id)
        if key in self._team_members:
            return False
        self._team_members[key] = TeamMember(team_id=team_id, user_id=user_id)
        return True

    async def remove_team_member(self, team_id: str, user_id: str) -> bool:
        return self._team_members.pop((team_id, user_id), None) is not None

    async def add_team_role(self, team_id: str, role_id: str) -> bool:
        if team_id not in self._teams:
            raise TeamNotFoundError(f"Team {team_id} not found")
        if role_id not in self._roles:
            raise RoleNotFoundError(f"Role {role_id} not found")
        key = (team_id, role_id)
        if key in self._team_roles:
            return False
        self._team_roles[key] = TeamRole(team_id=team_id, role_id=role_id)
        return True

    async def remove_team_role(self, team_id: str, role_id: str) -> bool:
        return self._team_roles.pop((team_id, role_id), None) is not None

    # Overrides

    async def upsert_override(self, override: UserPermissionOverride) -> UserPermissionOverride:
        self._overrides[(override.user_id, override.permission_id)] = override
        return override

    async def delete_override(self, user_id: str, permission_id: str) -> bool:
        return self._overrides.pop((user_id, permission_id), None) is not None
