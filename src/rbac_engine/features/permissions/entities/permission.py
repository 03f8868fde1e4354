"""Permission domain entity.

A permission is an immutable, globally unique dotted code such as
``tickets.read``. Codes come from the fixed vocabulary in
``rbac_engine.config.constants`` and are never renamed once stored.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ....core.exceptions import ValidationError


_CODE_PATTERN = re.compile(r"^[a-z][a-z0-9_]*\.[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class PermissionCode:
    """Immutable value object for a ``resource.action`` permission code."""

    value: str

    def __post_init__(self):
        if not self.value or not _CODE_PATTERN.match(self.value):
            raise ValidationError(
                f"Permission code must be in format 'resource.action', got: {self.value!r}"
            )

    @property
    def resource(self) -> str:
        return self.value.split(".")[0]

    @property
    def action(self) -> str:
        return self.value.split(".")[1]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Permission:
    """Stored permission row."""

    id: str
    code: str
    category: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        PermissionCode(self.code)
