"""Invalidation feature.

- entities/: InvalidationEvent and the InvalidationBus protocol
- adapters/: in-memory and Redis pub/sub buses
- services/: PermissionInvalidator
"""

from .adapters import InMemoryInvalidationBus, RedisInvalidationBus
from .entities import InvalidationBus, InvalidationEvent, InvalidationHandler
from .services import PermissionInvalidator

__all__ = [
    "InvalidationBus",
    "InvalidationEvent",
    "InvalidationHandler",
    "InMemoryInvalidationBus",
    "RedisInvalidationBus",
    "PermissionInvalidator",
]
