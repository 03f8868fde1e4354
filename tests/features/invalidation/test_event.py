"""Tests for invalidation event serialization."""

import json

import pytest

from rbac_engine.core.exceptions import InvalidationError
from rbac_engine.features.invalidation.entities import InvalidationEvent


class TestInvalidationEvent:

    def test_json_preserves_fields(self):
        event = InvalidationEvent.for_users(["u2", "u1"], source_node="node-a", reason="role r1 updated")

        parsed = InvalidationEvent.from_json(event.to_json())

        assert parsed == event
        assert json.loads(event.to_json())["user_ids"] == ["u1", "u2"]

    def test_accepts_bare_user_id_payload(self):
        parsed = InvalidationEvent.from_json(b'{"userIds": ["u1", "u2"]}')

        assert parsed.user_ids == {"u1", "u2"}
        assert parsed.source_node is None

    @pytest.mark.parametrize(
        "payload",
        [
            '["u1"]',
            '{"user_ids": "u1"}',
            '{"user_ids": [1, 2]}',
            "{}",
            "not json",
            '{"user_ids": ["u1"], "occurred_at": "yesterday"}',
        ],
    )
    def test_rejects_malformed_payloads(self, payload):
        with pytest.raises(InvalidationError):
            InvalidationEvent.from_json(payload)
