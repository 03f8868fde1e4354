"""Team domain entities.

Teams group users inside one tenant. Every role linked to a team is
inherited by all of its current members.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ....core.exceptions import ValidationError
from ....core.clock import utc_now


@dataclass(frozen=True)
class Team:
    """Team within a tenant."""

    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.tenant_id:
            raise ValidationError("Team must belong to a tenant")
        if not self.name or not self.name.strip():
            raise ValidationError("Team name cannot be empty")

    def with_changes(self, **changes) -> "Team":
        changes.setdefault("updated_at", utc_now())
        return replace(self, **changes)


@dataclass(frozen=True)
class TeamMember:
    team_id: str
    user_id: str
    joined_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class TeamRole:
    team_id: str
    role_id: str
    assigned_at: datetime = field(default_factory=utc_now)
