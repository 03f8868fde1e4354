"""Assignment records linking users to roles and permission overrides."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from ....core.clock import utc_now


@dataclass(frozen=True)
class UserRole:
    """Direct role grant, unique per (user_id, role_id)."""

    user_id: str
    role_id: str
    assigned_by: Optional[str] = None
    assigned_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class UserPermissionOverride:
    """Per-user force-grant (``allow=True``) or force-deny (``allow=False``).

    At most one override exists per (user_id, permission_id); setting a new
    value replaces the previous one.
    """

    user_id: str
    permission_id: str
    permission_code: str
    allow: bool
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class PermissionBreakdown:
    """Effective permission set of a user together with where it came from."""

    user_id: str
    direct_role_ids: FrozenSet[str]
    team_role_ids: FrozenSet[str]
    granted: FrozenSet[str]
    allowed_overrides: FrozenSet[str]
    denied_overrides: FrozenSet[str]
    effective: FrozenSet[str]

    @property
    def role_ids(self) -> FrozenSet[str]:
        return self.direct_role_ids | self.team_role_ids
