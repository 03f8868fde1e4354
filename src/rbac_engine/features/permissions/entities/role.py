"""Role domain entity.

A role belongs to one tenant, or to no tenant at all (``tenant_id is None``)
in which case it is a global/system role that applies in every tenant.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import FrozenSet, Optional

from ....core.clock import utc_now
from ....core.exceptions import ValidationError


@dataclass(frozen=True)
class Role:
    """Role with the permission codes it grants."""

    id: str
    tenant_id: Optional[str]
    name: str
    description: Optional[str] = None
    is_system_default: bool = False
    permission_codes: FrozenSet[str] = field(default_factory=frozenset)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Role name cannot be empty")
        if len(self.name) > 100:
            raise ValidationError(f"Role name cannot exceed 100 characters, got: {len(self.name)}")
        if not isinstance(self.permission_codes, frozenset):
            object.__setattr__(self, "permission_codes", frozenset(self.permission_codes))

    @property
    def is_global(self) -> bool:
        """Global roles have no tenant and apply everywhere."""
        return self.tenant_id is None

    def has_permission(self, code: str) -> bool:
        return code in self.permission_codes

    def with_changes(self, **changes) -> "Role":
        """Return a copy with the given fields replaced and ``updated_at`` bumped."""
        changes.setdefault("updated_at", utc_now())
        return replace(self, **changes)
