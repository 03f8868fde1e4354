"""Cache entities and protocols."""

from .protocols import CacheBackend

__all__ = ["CacheBackend"]
