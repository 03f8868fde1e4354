"""Invalidation event exchanged between service instances."""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from ....core.clock import utc_now
from ....core.exceptions import InvalidationError


@dataclass(frozen=True)
class InvalidationEvent:
    """Names the users whose cached permission sets are stale."""

    user_ids: FrozenSet[str]
    source_node: Optional[str] = None
    reason: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not isinstance(self.user_ids, frozenset):
            object.__setattr__(self, "user_ids", frozenset(self.user_ids))

    @classmethod
    def for_users(
        cls,
        user_ids: Iterable[str],
        source_node: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> "InvalidationEvent":
        return cls(user_ids=frozenset(user_ids), source_node=source_node, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "user_ids": sorted(self.user_ids),
            "source_node": self.source_node,
            "reason": self.reason,
            "occurred_at": self.occurred_at.isoformat(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: Union[str, bytes]) -> "InvalidationEvent":
        """Parse a published message.

        Also accepts the bare ``{"userIds": [...]}`` payload emitted by older
        publishers. Raises InvalidationError for anything else.
        """
        try:
            data = json.loads(payload)
        except (ValueError, TypeError) as e:
            raise InvalidationError(f"Invalidation payload is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidationError("Invalidation payload must be an object")

        user_ids = data.get("user_ids", data.get("userIds"))
        if not isinstance(user_ids, list) or not all(isinstance(u, str) for u in user_ids):
            raise InvalidationError("Invalidation payload has no user id list")

        kwargs: Dict[str, Any] = {
            "user_ids": frozenset(user_ids),
            "source_node": data.get("source_node"),
            "reason": data.get("reason"),
        }
        if data.get("event_id"):
            kwargs["event_id"] = str(data["event_id"])
        if data.get("occurred_at"):
            try:
                kwargs["occurred_at"] = datetime.fromisoformat(data["occurred_at"])
            except (ValueError, TypeError) as e:
                raise InvalidationError(f"Invalidation payload has a bad timestamp: {e}") from e
        return cls(**kwargs)
