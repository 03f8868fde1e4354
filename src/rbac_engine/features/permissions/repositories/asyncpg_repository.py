"""AsyncPG-based permission repository implementation.

Concrete implementation of the PermissionRepository protocol backed by a
PostgreSQL connection pool. Every multi-statement write runs in a single
transaction.
"""

import logging
from typing import List, Optional, Sequence, Set

import asyncpg

from ....core.clock import utc_now
from ....core.exceptions import RoleNotFoundError, TeamNotFoundError
from ...teams.entities.team import Team
from ..entities import Permission, Role, UserPermissionOverride, UserRole
from . import queries
from .error_handling import storage_error_handler


logger = logging.getLogger(__name__)


class AsyncPGPermissionRepository:
    """AsyncPG implementation of PermissionRepository protocol."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @classmethod
    async def connect(
        cls,
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
    ) -> "AsyncPGPermissionRepository":
        """Create a repository with its own connection pool."""
        pool = await asyncpg.create_pool(dsn, min_size=min_size, max_size=max_size)
        logger.info(f"Connected permission repository pool (min={min_size}, max={max_size})")
        return cls(pool)

    async def close(self) -> None:
        await self.pool.close()

    @storage_error_handler("create schema")
    async def create_schema(self) -> None:
        """Create the RBAC tables if they do not exist."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for statement in queries.CREATE_SCHEMA_STATEMENTS:
                    await conn.execute(statement)

    # Row mapping

    @staticmethod
    def _build_permission(row: asyncpg.Record) -> Permission:
        return Permission(
            id=row["id"],
            code=row["code"],
            category=row["category"],
            description=row["description"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _build_role(row: asyncpg.Record) -> Role:
        return Role(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            description=row["description"],
            is_system_default=row["is_system_default"],
            permission_codes=frozenset(row["permission_codes"] or ()),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _build_team(row: asyncpg.Record) -> Team:
        return Team(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _build_override(row: asyncpg.Record) -> UserPermissionOverride:
        return UserPermissionOverride(
            user_id=row["user_id"],
            permission_id=row["permission_id"],
            permission_code=row["permission_code"],
            allow=row["allow"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _command_count(status: str) -> int:
        """Row count from an asyncpg command status such as ``DELETE 1``."""
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError):
            return 0

    async def _fetch_column(self, query: str, *args) -> Set[str]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *args)
        return {row[0] for row in rows}

    # Permissions

    @storage_error_handler("list permissions")
    async def list_permissions(self) -> List[Permission]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(queries.LIST_PERMISSIONS)
        return [self._build_permission(row) for row in rows]

    @storage_error_handler("get permissions by codes")
    async def get_permissions_by_codes(self, codes: Sequence[str]) -> List[Permission]:
        if not codes:
            return []
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(queries.GET_PERMISSIONS_BY_CODES, list(codes))
        return [self._build_permission(row) for row in rows]

    @storage_error_handler("upsert permissions")
    async def upsert_permissions(self, permissions: Sequence[Permission]) -> int:
        added = 0
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for p in permissions:
                    status = await conn.execute(
                        queries.INSERT_PERMISSION_IF_MISSING,
                        p.id, p.code, p.category, p.description, p.created_at,
                    )
                    added += self._command_count(status)
        return added

    # Calculator reads

    @storage_error_handler("get user roles")
    async def get_user_role_ids(self, user_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_USER_ROLE_IDS, user_id)

    @storage_error_handler("get user team roles")
    async def get_user_team_role_ids(self, user_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_USER_TEAM_ROLE_IDS, user_id)

    @storage_error_handler("get role permissions")
    async def get_role_permission_codes(self, role_ids: Sequence[str]) -> Set[str]:
        if not role_ids:
            return set()
        return await self._fetch_column(queries.GET_ROLE_PERMISSION_CODES, list(role_ids))

    @storage_error_handler("get user overrides")
    async def get_user_overrides(self, user_id: str) -> List[UserPermissionOverride]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(queries.GET_USER_OVERRIDES, user_id)
        return [self._build_override(row) for row in rows]

    # Roles

    @storage_error_handler("get role")
    async def get_role(self, role_id: str) -> Optional[Role]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(queries.GET_ROLE, role_id)
        return self._build_role(row) if row else None

    @storage_error_handler("get role by name")
    async def get_role_by_name(self, tenant_id: Optional[str], name: str) -> Optional[Role]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(queries.GET_ROLE_BY_NAME, tenant_id, name)
        return self._build_role(row) if row else None

    @storage_error_handler("list roles")
    async def list_roles(self, tenant_id: Optional[str]) -> List[Role]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(queries.LIST_ROLES, tenant_id)
        return [self._build_role(row) for row in rows]

    @storage_error_handler("create role")
    async def create_role(self, role: Role, permission_ids: Sequence[str]) -> Role:
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(
                    queries.INSERT_ROLE,
                    role.id, role.tenant_id, role.name, role.description,
                    role.is_system_default, role.created_at, role.updated_at,
                )
                if permission_ids:
                    await conn.execute(queries.INSERT_ROLE_PERMISSIONS, role.id, list(permission_ids))
                row = await conn.fetchrow(queries.GET_ROLE, role.id)
        logger.info(f"Created role {role.id} ({role.name}) with {len(permission_ids)} permissions")
        return self._build_role(row)

    @storage_error_handler("update role")
    async def update_role(self, role: Role, permission_ids: Optional[Sequence[str]] = None) -> Role:
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                status = await conn.execute(
                    queries.UPDATE_ROLE, role.id, role.name, role.description, role.updated_at
                )
                if self._command_count(status) == 0:
                    raise RoleNotFoundError(f"Role {role.id} not found")
                if permission_ids is not None:
                    await conn.execute(queries.DELETE_ROLE_PERMISSIONS, role.id)
                    if permission_ids:
                        await conn.execute(
                            queries.INSERT_ROLE_PERMISSIONS, role.id, list(permission_ids)
                        )
                row = await conn.fetchrow(queries.GET_ROLE, role.id)
        return self._build_role(row)

    @storage_error_handler("delete role")
    async def delete_role(self, role_id: str, reassign_to: Optional[str] = None) -> None:
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if reassign_to is not None:
                    await conn.execute(queries.REASSIGN_USER_ROLES, role_id, reassign_to)
                status = await conn.execute(queries.DELETE_ROLE, role_id)
                if self._command_count(status) == 0:
                    raise RoleNotFoundError(f"Role {role_id} not found")
        logger.info(f"Deleted role {role_id} (reassigned to {reassign_to})")

    @storage_error_handler("get role holders")
    async def get_role_user_ids(self, role_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_ROLE_USER_IDS, role_id)

    @storage_error_handler("get role team members")
    async def get_role_team_member_ids(self, role_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_ROLE_TEAM_MEMBER_IDS, role_id)

    @storage_error_handler("assign role")
    async def add_user_role(self, user_role: UserRole) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(
                queries.INSERT_USER_ROLE,
                user_role.user_id, user_role.role_id,
                user_role.assigned_by, user_role.assigned_at,
            )
        return self._command_count(status) > 0

    @storage_error_handler("revoke role")
    async def remove_user_role(self, user_id: str, role_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.DELETE_USER_ROLE, user_id, role_id)
        return self._command_count(status) > 0

    # Teams

    @storage_error_handler("get team")
    async def get_team(self, team_id: str) -> Optional[Team]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(queries.GET_TEAM, team_id)
        return self._build_team(row) if row else None

    @storage_error_handler("list teams")
    async def list_teams(self, tenant_id: str) -> List[Team]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(queries.LIST_TEAMS, tenant_id)
        return [self._build_team(row) for row in rows]

    @storage_error_handler("create team")
    async def create_team(self, team: Team) -> Team:
        async with self.pool.acquire() as conn:
            await conn.execute(
                queries.INSERT_TEAM,
                team.id, team.tenant_id, team.name, team.description,
                team.created_at, team.updated_at,
            )
        return team

    @storage_error_handler("update team")
    async def update_team(self, team: Team) -> Team:
        async with self.pool.acquire() as conn:
            status = await conn.execute(
                queries.UPDATE_TEAM, team.id, team.name, team.description, team.updated_at
            )
        if self._command_count(status) == 0:
            raise TeamNotFoundError(f"Team {team.id} not found")
        return team

    @storage_error_handler("delete team")
    async def delete_team(self, team_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.DELETE_TEAM, team_id)
        return self._command_count(status) > 0

    @storage_error_handler("get team members")
    async def get_team_member_ids(self, team_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_TEAM_MEMBER_IDS, team_id)

    @storage_error_handler("get team roles")
    async def get_team_role_ids(self, team_id: str) -> Set[str]:
        return await self._fetch_column(queries.GET_TEAM_ROLE_IDS, team_id)

    @storage_error_handler("add team member")
    async def add_team_member(self, team_id: str, user_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.INSERT_TEAM_MEMBER, team_id, user_id)
        return self._command_count(status) > 0

    @storage_error_handler("remove team member")
    async def remove_team_member(self, team_id: str, user_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.DELETE_TEAM_MEMBER, team_id, user_id)
        return self._command_count(status) > 0

    @storage_error_handler("add team role")
    async def add_team_role(self, team_id: str, role_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.INSERT_TEAM_ROLE, team_id, role_id)
        return self._command_count(status) > 0

    @storage_error_handler("remove team role")
    async def remove_team_role(self, team_id: str, role_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.DELETE_TEAM_ROLE, team_id, role_id)
        return self._command_count(status) > 0

    # Overrides

    @storage_error_handler("set permission override")
    async def upsert_override(self, override: UserPermissionOverride) -> UserPermissionOverride:
        async with self.pool.acquire() as conn:
            await conn.execute(
                queries.UPSERT_OVERRIDE,
                override.user_id, override.permission_id, override.allow,
                override.created_by, override.created_at or utc_now(),
            )
        return override

    @storage_error_handler("remove permission override")
    async def delete_override(self, user_id: str, permission_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(queries.DELETE_OVERRIDE, user_id, permission_id)
        return self._command_count(status) > 0
