"""Invalidation entities and protocols."""

from .event import InvalidationEvent
from .protocols import InvalidationBus, InvalidationHandler

__all__ = ["InvalidationEvent", "InvalidationBus", "InvalidationHandler"]
