"""Tests for the asyncpg repository against a mocked connection pool."""

from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from rbac_engine.core.exceptions import (
    ConflictError,
    RoleNotFoundError,
    StorageError,
    StorageUnavailableError,
)
from rbac_engine.features.permissions.entities import UserRole
from rbac_engine.features.permissions.repositories import AsyncPGPermissionRepository
from rbac_engine.features.permissions.repositories import queries


class AsyncContext:
    """Async context manager yielding a fixed value."""

    def __init__(self, value=None):
        self.value = value

    async def __aenter__(self):
        return self.value

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def mock_connection():
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    conn.transaction = MagicMock(return_value=AsyncContext())
    return conn


@pytest.fixture
def repository(mock_connection):
    pool = MagicMock()
    pool.acquire = MagicMock(return_value=AsyncContext(mock_connection))
    pool.close = AsyncMock()
    return AsyncPGPermissionRepository(pool)


class TestAsyncPGPermissionRepository:
    """Test query wiring and driver error translation."""

    @pytest.mark.parametrize(
        "status,count",
        [("DELETE 3", 3), ("INSERT 0 1", 1), ("UPDATE 0", 0), ("", 0)],
    )
    def test_command_count(self, status, count):
        assert AsyncPGPermissionRepository._command_count(status) == count

    @pytest.mark.asyncio
    async def test_user_role_ids(self, repository, mock_connection):
        mock_connection.fetch.return_value = [("r1",), ("r2",)]

        assert await repository.get_user_role_ids("u1") == {"r1", "r2"}
        mock_connection.fetch.assert_awaited_once_with(queries.GET_USER_ROLE_IDS, "u1")

    @pytest.mark.asyncio
    async def test_empty_role_list_skips_query(self, repository, mock_connection):
        assert await repository.get_role_permission_codes([]) == set()
        mock_connection.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_assignment_returns_false(self, repository, mock_connection):
        mock_connection.execute.return_value = "INSERT 0 0"

        assert await repository.add_user_role(UserRole(user_id="u1", role_id="r1")) is False

    @pytest.mark.asyncio
    async def test_delete_missing_role(self, repository, mock_connection):
        mock_connection.execute.return_value = "DELETE 0"

        with pytest.raises(RoleNotFoundError):
            await repository.delete_role("missing")

    @pytest.mark.asyncio
    async def test_delete_with_reassignment_runs_migration_first(self, repository, mock_connection):
        mock_connection.execute.return_value = "DELETE 1"

        await repository.delete_role("old", reassign_to="new")

        calls = [call.args for call in mock_connection.execute.await_args_list]
        assert calls == [(queries.REASSIGN_USER_ROLES, "old", "new"), (queries.DELETE_ROLE, "old")]

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self, repository, mock_connection):
        mock_connection.execute.side_effect = asyncpg.exceptions.UniqueViolationError("duplicate key")

        with pytest.raises(ConflictError):
            await repository.add_team_member("t1", "u1")

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_unavailable(self, repository, mock_connection):
        mock_connection.fetch.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(StorageUnavailableError):
            await repository.get_user_team_role_ids("u1")

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_storage_error(self, repository, mock_connection):
        mock_connection.fetch.side_effect = RuntimeError("bad row")

        with pytest.raises(StorageError) as exc_info:
            await repository.list_permissions()
        assert not isinstance(exc_info.value, StorageUnavailableError)
