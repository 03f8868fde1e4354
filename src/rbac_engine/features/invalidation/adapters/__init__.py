"""Invalidation bus adapters."""

from .memory_bus import InMemoryInvalidationBus
from .redis_bus import RedisInvalidationBus

__all__ = ["InMemoryInvalidationBus", "RedisInvalidationBus"]
