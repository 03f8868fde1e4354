"""Tests for per-user permission overrides."""

import pytest

from rbac_engine.config.constants import PERMISSIONS
from rbac_engine.core.exceptions import InvalidPermissionCodeError


class TestOverrideService:
    """Test setting, replacing and removing overrides."""

    @pytest.mark.asyncio
    async def test_set_override_invalidates_user(self, override_service, authorization, cache):
        assert await authorization.get_effective_permissions("u1") == frozenset()

        override = await override_service.set_user_permission_override(
            "u1", PERMISSIONS.REPORTS_VIEW, allow=True, created_by="admin"
        )

        assert override.permission_code == PERMISSIONS.REPORTS_VIEW
        assert override.created_by == "admin"
        assert await cache.get("u1") is None
        assert await authorization.has_permission("u1", PERMISSIONS.REPORTS_VIEW)

    @pytest.mark.asyncio
    async def test_setting_again_replaces_override(self, override_service):
        await override_service.set_user_permission_override("u1", PERMISSIONS.REPORTS_VIEW, allow=True)
        await override_service.set_user_permission_override("u1", PERMISSIONS.REPORTS_VIEW, allow=False)

        overrides = await override_service.list_user_overrides("u1")

        assert len(overrides) == 1
        assert overrides[0].allow is False

    @pytest.mark.asyncio
    async def test_remove_override(self, override_service, authorization):
        await override_service.set_user_permission_override("u1", PERMISSIONS.REPORTS_VIEW, allow=True)

        assert await override_service.remove_user_permission_override("u1", PERMISSIONS.REPORTS_VIEW) is True
        assert await override_service.remove_user_permission_override("u1", PERMISSIONS.REPORTS_VIEW) is False
        assert not await authorization.has_permission("u1", PERMISSIONS.REPORTS_VIEW)

    @pytest.mark.asyncio
    async def test_unknown_code_rejected(self, override_service):
        with pytest.raises(InvalidPermissionCodeError):
            await override_service.set_user_permission_override("u1", "reports.burn", allow=True)
        assert await override_service.list_user_overrides("u1") == []
