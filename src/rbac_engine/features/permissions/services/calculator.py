"""Effective permission calculation.

effective = union of permissions of every direct and team-inherited role,
then overrides applied last: an allow override adds its code and a deny
override removes it, whatever the roles grant.
"""

import logging
from typing import FrozenSet

from ..entities import PermissionBreakdown, PermissionRepository


logger = logging.getLogger(__name__)


class EffectivePermissionCalculator:
    """Read-only resolver of a user's effective permission set.

    Holds no cache; the same store snapshot always yields the same result.
    """

    def __init__(self, repository: PermissionRepository):
        self.repository = repository

    async def compute_effective_permissions(self, user_id: str) -> FrozenSet[str]:
        breakdown = await self.explain(user_id)
        return breakdown.effective

    async def explain(self, user_id: str) -> PermissionBreakdown:
        """Compute the effective set along with the sources that produced it."""
        direct_role_ids = frozenset(await self.repository.get_user_role_ids(user_id))
        team_role_ids = frozenset(await self.repository.get_user_team_role_ids(user_id))

        role_ids = direct_role_ids | team_role_ids
        granted: FrozenSet[str] = frozenset()
        if role_ids:
            granted = frozenset(await self.repository.get_role_permission_codes(sorted(role_ids)))

        overrides = await self.repository.get_user_overrides(user_id)
        allowed = frozenset(o.permission_code for o in overrides if o.allow)
        denied = frozenset(o.permission_code for o in overrides if not o.allow)

        effective = (granted | allowed) - denied

        logger.debug(
            f"Resolved {len(effective)} permissions for user {user_id} "
            f"from {len(role_ids)} roles and {len(overrides)} overrides"
        )
        return PermissionBreakdown(
            user_id=user_id,
            direct_role_ids=direct_role_ids,
            team_role_ids=team_role_ids,
            granted=granted,
            allowed_overrides=allowed,
            denied_overrides=denied,
            effective=effective,
        )
